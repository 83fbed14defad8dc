"""Active prompts and quick preview for a frame.

The quick preview is a compact summary of which prompts are active at a
frame and how they are weighted, written in the same ``AND`` syntax the
renderer uses. It shows prompt names rather than their text.

Advisory checks that do not depend on the frame also live here:
composability warnings (a prompt with its own ``AND`` sections overlapping
another prompt) and the template-mode common prompt check.
"""

from typing import List, Optional

from ..config.defaults import AND_TOKEN, NO_PROMPT_SENTINEL, TEMPLATE_PLACEHOLDER
from ..models import ComposabilityWarning, Prompt, PromptSet
from ..utils.prompt_utils import (
    contains_composable_diffusion,
    intervals_overlap,
    normalize_prompt_name,
)
from .weights import calculate_weight

__all__ = [
    'active_prompts',
    'quick_preview',
    'composability_warnings',
    'template_warning',
]


def is_active(prompt: Prompt, frame: int) -> bool:
    return prompt.all_frames or prompt.from_ <= frame <= prompt.to


def active_prompts(prompt_set: PromptSet, frame: int) -> List[Prompt]:
    """Prompts covering frame, in timeline order."""
    return [p for p in prompt_set.prompt_list if is_active(p, frame)]


def quick_preview(prompt_set: PromptSet, frame: int, last_frame: int) -> str:
    """Summarise the prompts active at frame.

    Returns:
        The no-prompt sentinel if nothing is active, the normalised name of a
        single active prompt, or "name : weight" pairs joined with " AND ".

    Examples:
        >>> from parseq_prompts.config.defaults import get_default_prompts
        >>> quick_preview(get_default_prompts(10), 3, 10)
        'Prompt_1'
    """
    active = active_prompts(prompt_set, frame)
    if not active:
        return NO_PROMPT_SENTINEL
    if len(active) == 1:
        return normalize_prompt_name(active[0].name)
    return f" {AND_TOKEN} ".join(
        f"{normalize_prompt_name(p.name)} : {calculate_weight(p, frame, last_frame)}"
        for p in active
    )


def composability_warnings(prompt_set: PromptSet, last_frame: int) -> List[ComposabilityWarning]:
    """Find prompts that contain ' AND ' while overlapping other prompts.

    Overlapping prompts are already combined with AND, so a prompt that adds
    its own AND sections may not render as intended. Overlap is judged on
    the prompts' intervals, all-frames prompts covering the whole timeline.
    """
    warnings = []
    for prompt in prompt_set.prompt_list:
        if not (contains_composable_diffusion(prompt.positive)
                or contains_composable_diffusion(prompt.negative)):
            continue
        span = prompt.span(last_frame)
        overlapping = [
            other.name for other in prompt_set.prompt_list
            if other is not prompt and intervals_overlap(span, other.span(last_frame))
        ]
        if overlapping:
            warnings.append(ComposabilityWarning(prompt_name=prompt.name, overlapping=overlapping))
    return warnings


def template_warning(prompt_set: PromptSet) -> Optional[str]:
    """Soft check of the common prompt in template mode.

    In template mode the common prompt must either be empty or contain the
    placeholder. Returns a warning message, or None if there is nothing to
    report. Never blocks a commit.
    """
    if prompt_set.common_prompt_pos != "template":
        return None
    common = prompt_set.common_prompt
    for text in (common.positive, common.negative):
        if text.strip() and TEMPLATE_PLACEHOLDER not in text:
            return (
                f"In template mode, common prompts must either be empty "
                f"or contain '{TEMPLATE_PLACEHOLDER}'."
            )
    return None
