"""Composition of the final prompt text for each frame.

The composer merges every active prompt with the common prompt, weights it
with the weight engine and joins overlapping prompts using composable
diffusion syntax::

    (a cat, 4k):0.5000 AND (a dog, 4k):1

Weights are written verbatim, including deferred custom expressions such as
``${prompt_weight_1}``; evaluating them is left to the downstream renderer.

Classes:
    RenderedPrompt: Positive/negative text for one frame

Functions:
    render_frame: Compose the prompt for a single frame
    render_prompt_series: Compose prompts for every frame as a pandas Series
"""

from dataclasses import dataclass
from typing import Optional

import pandas as pd

from ..config.defaults import NEG_DELIMITER
from ..models import PromptSet
from ..utils.prompt_utils import apply_common_prompt, build_weighted_prompt_part
from .preview import active_prompts
from .weights import FULL_WEIGHT, calculate_weight

__all__ = [
    'RenderedPrompt',
    'render_frame',
    'render_prompt_series',
]


@dataclass(frozen=True)
class RenderedPrompt:
    """Composed prompt text for one frame."""
    positive: str
    negative: str

    @property
    def deforum_prompt(self) -> str:
        """Single-string form: "positive --neg negative"."""
        if self.negative:
            return f"{self.positive} {NEG_DELIMITER} {self.negative}".strip()
        return self.positive


def render_frame(prompt_set: PromptSet, frame: int, last_frame: int) -> Optional[RenderedPrompt]:
    """Compose the positive and negative prompt for frame.

    Args:
        prompt_set: Prompts to compose
        frame: Frame to render
        last_frame: Final frame of the timeline

    Returns:
        RenderedPrompt, or None when prompts are disabled for the document.
        Individually disabled prompts are skipped.

    Examples:
        >>> from parseq_prompts.config.defaults import get_default_prompts
        >>> s = get_default_prompts(10)
        >>> s.prompt_list[0].positive = "a cat"
        >>> s.common_prompt.positive = "4k"
        >>> render_frame(s, 0, 10).positive
        'a cat 4k'
    """
    if not prompt_set.enabled:
        return None

    common = prompt_set.common_prompt
    position = prompt_set.common_prompt_pos
    parts = []
    for prompt in active_prompts(prompt_set, frame):
        if not prompt.is_enabled:
            continue
        parts.append((
            apply_common_prompt(prompt.positive, common.positive, position),
            apply_common_prompt(prompt.negative, common.negative, position),
            calculate_weight(prompt, frame, last_frame),
        ))

    if not parts:
        return RenderedPrompt(positive="", negative="")

    if len(parts) == 1 and parts[0][2] == FULL_WEIGHT:
        positive, negative, _ = parts[0]
        return RenderedPrompt(positive=positive, negative=negative)

    return RenderedPrompt(
        positive=build_weighted_prompt_part((pos, weight) for pos, _, weight in parts),
        negative=build_weighted_prompt_part((neg, weight) for _, neg, weight in parts),
    )


def render_prompt_series(prompt_set: PromptSet, last_frame: int) -> pd.Series:
    """Compose prompts for frames 0..last_frame.

    Returns:
        pandas Series indexed by frame holding "positive --neg negative"
        strings; empty strings throughout when prompts are disabled.
    """
    frames = range(last_frame + 1)
    values = []
    for frame in frames:
        rendered = render_frame(prompt_set, frame, last_frame)
        values.append(rendered.deforum_prompt if rendered is not None else "")
    # dtype=object keeps string values without a pandas FutureWarning
    return pd.Series(values, index=frames, dtype=object)
