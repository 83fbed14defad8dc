"""Blend weight of a single prompt at a frame.

Weights are returned as strings: a custom overlap produces a deferred
expression (``${prompt_weight_1}``) that only the downstream renderer can
evaluate, so numeric weights share the same type.

Linear fades ramp 0 -> 1 over ``in_frames`` from the start of the prompt and
1 -> 0 over ``out_frames`` up to its end. The fade-in window is checked
first, so a prompt shorter than ``in_frames + out_frames`` never reaches full
weight.
"""

from ..models import Prompt
from ..utils.prompt_utils import format_precision

__all__ = [
    'FULL_WEIGHT',
    'calculate_weight',
]

FULL_WEIGHT = "1"


def calculate_weight(prompt: Prompt, frame: int, last_frame: int) -> str:
    """Return the weight of prompt at frame as a string.

    Args:
        prompt: Prompt whose overlap configuration is applied
        frame: Frame to evaluate
        last_frame: Final frame, the end of an all-frames prompt

    Returns:
        "1", a 4-significant-digit ratio such as "0.5000", or "${formula}"

    Examples:
        >>> from parseq_prompts.models import Overlap
        >>> p = Prompt(from_=0, to=10, overlap=Overlap(type="linear", in_frames=4))
        >>> calculate_weight(p, 2, 100)
        '0.5000'
        >>> calculate_weight(p, 6, 100)
        '1'
    """
    overlap = prompt.overlap

    if overlap.type == "linear":
        start, end = prompt.span(last_frame)
        if overlap.in_frames and frame < start + overlap.in_frames:
            return format_precision((frame - start) / overlap.in_frames)
        if overlap.out_frames and frame > end - overlap.out_frames:
            fade_offset = frame - (end - overlap.out_frames)
            return format_precision(1 - fade_offset / overlap.out_frames)
        return FULL_WEIGHT

    if overlap.type == "custom":
        return "${" + overlap.custom + "}"

    return FULL_WEIGHT
