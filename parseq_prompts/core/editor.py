"""Invariant-preserving edits on prompt sets.

Every function takes a PromptSet and returns a new one; the input is never
modified. After any edit each prompt satisfies ``0 <= from <= to`` and, for
edits that take ``last_frame``, ``to <= last_frame``. Out-of-range values
are clamped rather than rejected.

Operations:
    add_prompt: Append a prompt after the last one
    delete_prompt: Remove a prompt by index
    resize_prompt: Commit a new from/to/fade length with clamping
    reorder_prompts: Sort by start frame and rename sequentially
    evenly_space_prompts: Spread all prompts evenly across the timeline
    apply_timeline_drag: Take intervals from the draggable timeline view
    fit_to_timeline: Pull intervals inside a shortened timeline
    append_prompts: Append imported prompts

Field setters (text, all-frames, overlap type, custom formula, enabled,
common prompt position) live at the bottom of the module.
"""

import math
from typing import Iterable, Optional, Sequence, Tuple

from ..config.defaults import DEFAULT_NEW_PROMPT_SPAN, get_custom_formula_placeholder
from ..models import (
    COMMON_PROMPT_POSITIONS,
    OVERLAP_TYPES,
    Overlap,
    Prompt,
    PromptSet,
)
from ..utils.logging import log
from ..utils.prompt_utils import clamp, next_prompt_number

__all__ = [
    'INTERVAL_FIELDS',
    'add_prompt',
    'delete_prompt',
    'resize_prompt',
    'reorder_prompts',
    'evenly_space_prompts',
    'apply_timeline_drag',
    'fit_to_timeline',
    'append_prompts',
    'set_prompt_text',
    'set_all_frames',
    'set_overlap_type',
    'set_custom_formula',
    'set_enabled',
    'set_common_prompt_pos',
]

# Numeric prompt fields committed through resize_prompt.
INTERVAL_FIELDS = ("from", "to", "in_frames", "out_frames")


def _copy(prompt_set: PromptSet) -> PromptSet:
    return prompt_set.model_copy(deep=True)


def _in_range(prompt_set: PromptSet, index: int) -> bool:
    return 0 <= index < len(prompt_set.prompt_list)


# ============================================================================
# STRUCTURAL EDITS
# ============================================================================


def add_prompt(prompt_set: PromptSet, last_frame: int,
               span: int = DEFAULT_NEW_PROMPT_SPAN) -> PromptSet:
    """Append a new empty prompt starting right after the last prompt.

    The new prompt is named "Prompt N" with the next free number, starts at
    the previous prompt's end + 1 and lasts ``span`` frames, both clamped to
    the last frame.
    """
    new_set = _copy(prompt_set)
    names = [p.name for p in new_set.prompt_list]
    number = next_prompt_number(names)

    if new_set.prompt_list:
        start = min(last_frame, new_set.prompt_list[-1].to + 1)
    else:
        start = 0
    start = max(0, start)
    end = min(last_frame, start + span)

    new_set.prompt_list.append(Prompt(
        name=f"Prompt {number}",
        positive="",
        negative="",
        all_frames=False,
        from_=start,
        to=max(start, end),
        overlap=Overlap(type="none", in_frames=0, out_frames=0,
                        custom=get_custom_formula_placeholder(number)),
    ))
    log.debug(f"Added Prompt {number} spanning {start}-{max(start, end)}")
    return new_set


def delete_prompt(prompt_set: PromptSet, index: int) -> PromptSet:
    """Remove the prompt at index. Other prompts keep their names.

    The last remaining prompt cannot be deleted; an out-of-range index or an
    attempt to delete the only prompt returns an unchanged copy.
    """
    new_set = _copy(prompt_set)
    if not _in_range(new_set, index):
        log.warning(f"Cannot delete prompt {index}: no such prompt")
        return new_set
    if len(new_set.prompt_list) < 2:
        log.warning("Cannot delete the only prompt")
        return new_set
    removed = new_set.prompt_list.pop(index)
    log.debug(f"Deleted {removed.name}")
    return new_set


def resize_prompt(prompt_set: PromptSet, index: int, field: str, value: int,
                  last_frame: int) -> PromptSet:
    """Commit a new value for one of a prompt's interval or fade fields.

    The prompt's interval is first pulled inside [0, last_frame], then:
        from: into [0, to]
        to: into [from, last_frame]
        in_frames / out_frames: into [0, to - from]

    Raises:
        ValueError: If field is not one of INTERVAL_FIELDS
    """
    if field not in INTERVAL_FIELDS:
        raise ValueError(
            f"Unsupported field '{field}'. Supported: {', '.join(INTERVAL_FIELDS)}"
        )
    new_set = _copy(prompt_set)
    if not _in_range(new_set, index):
        return new_set

    prompt = new_set.prompt_list[index]
    last_frame = max(0, last_frame)
    prompt.to = clamp(prompt.to, 0, last_frame)
    prompt.from_ = clamp(prompt.from_, 0, prompt.to)
    value = int(value)
    if field == "from":
        prompt.from_ = clamp(value, 0, prompt.to)
    elif field == "to":
        prompt.to = clamp(value, prompt.from_, last_frame)
    else:
        length = max(0, prompt.to - prompt.from_)
        setattr(prompt.overlap, field, clamp(value, 0, length))
    return new_set


def reorder_prompts(prompt_set: PromptSet) -> PromptSet:
    """Sort prompts by start frame and rename them "Prompt 1".."Prompt N".

    The sort is stable, so prompts sharing a start frame keep their relative
    order. Custom names are discarded.
    """
    new_set = _copy(prompt_set)
    ordered = sorted(new_set.prompt_list, key=lambda p: p.from_)
    for idx, prompt in enumerate(ordered):
        prompt.name = f"Prompt {idx + 1}"
    new_set.prompt_list = ordered
    return new_set


def evenly_space_prompts(prompt_set: PromptSet, last_frame: int,
                         overlap_frames: int = 0) -> PromptSet:
    """Spread all prompts evenly across [0, last_frame].

    Each prompt gets an equal span, widened by half the overlap on each side
    and clamped to the timeline. With a positive overlap prompts fade
    linearly into each other; no fade is applied at frame 0 or the last frame.

    Examples:
        >>> from parseq_prompts.config.defaults import get_default_prompts
        >>> s = add_prompt(get_default_prompts(99), 99)
        >>> [(p.from_, p.to) for p in evenly_space_prompts(s, 99).prompt_list]
        [(0, 50), (50, 99)]
    """
    new_set = _copy(prompt_set)
    count = len(new_set.prompt_list)
    if count == 0:
        return new_set

    overlap_frames = max(0, int(overlap_frames))
    span = (last_frame + 1) / count
    for idx, prompt in enumerate(new_set.prompt_list):
        start = max(0, math.ceil(idx * span - overlap_frames / 2))
        end = min(last_frame, math.floor((idx + 1) * span + overlap_frames / 2))
        prompt.from_ = min(start, end)
        prompt.to = end
        prompt.all_frames = False
        prompt.overlap.type = "linear" if overlap_frames > 0 else "none"
        prompt.overlap.in_frames = 0 if prompt.from_ <= 0 else overlap_frames
        prompt.overlap.out_frames = 0 if prompt.to >= last_frame else overlap_frames
    log.debug(f"Spaced {count} prompt(s) across {last_frame} frames with overlap {overlap_frames}")
    return new_set


def apply_timeline_drag(prompt_set: PromptSet, spans: Sequence[Tuple[float, float]],
                        last_frame: int) -> PromptSet:
    """Take prompt intervals from the draggable timeline view.

    The timeline reports one (start, end) pair per prompt row, in prompt
    order, as fractional frame positions. They are rounded half up to whole frames
    and clamped so the interval invariant holds. Rows beyond the prompt list
    are ignored; prompts without a row keep their interval.
    """
    new_set = _copy(prompt_set)
    for prompt, (start, end) in zip(new_set.prompt_list, spans):
        start = clamp(math.floor(start + 0.5), 0, last_frame)
        end = clamp(math.floor(end + 0.5), 0, last_frame)
        prompt.from_ = min(start, end)
        prompt.to = max(start, end)
    return new_set


def fit_to_timeline(prompt_set: PromptSet, last_frame: int) -> PromptSet:
    """Pull every interval inside [0, last_frame], e.g. after the timeline shrinks.

    Fade lengths are left alone; weights already stop at the interval ends.
    """
    new_set = _copy(prompt_set)
    last_frame = max(0, last_frame)
    for prompt in new_set.prompt_list:
        prompt.to = clamp(prompt.to, 0, last_frame)
        prompt.from_ = clamp(prompt.from_, 0, prompt.to)
    return new_set


def append_prompts(prompt_set: PromptSet, prompts: Iterable[Prompt]) -> PromptSet:
    """Append prompts (typically from an import) without touching existing ones."""
    new_set = _copy(prompt_set)
    new_set.prompt_list.extend(p.model_copy(deep=True) for p in prompts)
    return new_set


# ============================================================================
# FIELD SETTERS
# ============================================================================


def _target(prompt_set: PromptSet, index: Optional[int]) -> Optional[Prompt]:
    # index None addresses the common prompt
    if index is None:
        return prompt_set.common_prompt
    if _in_range(prompt_set, index):
        return prompt_set.prompt_list[index]
    return None


def set_prompt_text(prompt_set: PromptSet, index: Optional[int],
                    positive: Optional[str] = None,
                    negative: Optional[str] = None) -> PromptSet:
    """Replace the positive and/or negative text of a prompt or the common prompt."""
    new_set = _copy(prompt_set)
    prompt = _target(new_set, index)
    if prompt is None:
        return new_set
    if positive is not None:
        prompt.positive = positive
    if negative is not None:
        prompt.negative = negative
    return new_set


def set_all_frames(prompt_set: PromptSet, index: int, all_frames: bool) -> PromptSet:
    """Toggle all-frames activation. from/to are kept for when it is turned off."""
    new_set = _copy(prompt_set)
    if _in_range(new_set, index):
        new_set.prompt_list[index].all_frames = bool(all_frames)
    return new_set


def set_overlap_type(prompt_set: PromptSet, index: int, overlap_type: str) -> PromptSet:
    """Switch a prompt's fade mode, keeping the inactive fade settings."""
    if overlap_type not in OVERLAP_TYPES:
        raise ValueError(
            f"Unsupported overlap type '{overlap_type}'. Supported: {', '.join(OVERLAP_TYPES)}"
        )
    new_set = _copy(prompt_set)
    if _in_range(new_set, index):
        new_set.prompt_list[index].overlap.type = overlap_type
    return new_set


def set_custom_formula(prompt_set: PromptSet, index: int, formula: str) -> PromptSet:
    """Store a custom weight formula. It is never parsed here."""
    new_set = _copy(prompt_set)
    if _in_range(new_set, index):
        new_set.prompt_list[index].overlap.custom = formula
    return new_set


def set_enabled(prompt_set: PromptSet, enabled: bool) -> PromptSet:
    new_set = _copy(prompt_set)
    new_set.enabled = bool(enabled)
    return new_set


def set_common_prompt_pos(prompt_set: PromptSet, position: str) -> PromptSet:
    """Choose how the common prompt is merged: append, prepend or template."""
    if position not in COMMON_PROMPT_POSITIONS:
        raise ValueError(
            f"Unsupported common prompt position '{position}'. "
            f"Supported: {', '.join(COMMON_PROMPT_POSITIONS)}"
        )
    new_set = _copy(prompt_set)
    new_set.common_prompt_pos = position
    return new_set
