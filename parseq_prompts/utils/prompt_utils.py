"""Pure functions for prompt text handling.

Small helpers shared by the importer, weight engine, preview and composer.
None of them touch prompt sets; they work on strings and numbers only.
"""

import re
from typing import Iterable, List, Optional, Tuple

from ..config.defaults import AND_TOKEN, NEG_DELIMITER, TEMPLATE_PLACEHOLDER

# ============================================================================
# NUMBER PARSING
# ============================================================================

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(value) -> Optional[int]:
    """Parse the integer a string starts with, like JavaScript's parseInt.

    Args:
        value: String (or number) to parse

    Returns:
        The leading integer, or None if the value does not start with one

    Examples:
        >>> parse_leading_int("42")
        42
        >>> parse_leading_int(" 10abc")
        10
        >>> parse_leading_int("abc") is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else None
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def format_precision(value: float, digits: int = 4) -> str:
    """Render a number to a fixed count of significant digits.

    Trailing zeros are kept so every fade ratio renders with the same width.

    Examples:
        >>> format_precision(0.5)
        '0.5000'
        >>> format_precision(0.0)
        '0.000'
        >>> format_precision(1 / 3)
        '0.3333'
    """
    return f"{value:#.{digits}g}"


# ============================================================================
# PROMPT TEXT
# ============================================================================


def split_prompt_into_pos_neg(text: str) -> Tuple[str, str]:
    """Split prompt text into positive and negative parts.

    Uses '--neg' delimiter to separate positive from negative prompts. Only
    the first delimiter splits; later ones stay in the negative text.

    Args:
        text: Prompt text potentially containing '--neg' delimiter

    Returns:
        Tuple of (positive_prompt, negative_prompt)
    """
    parts = text.split(NEG_DELIMITER, 1)
    if len(parts) > 1:
        return parts[0].strip(), parts[1].strip()
    return parts[0].strip(), ""


def normalize_prompt_name(name: str) -> str:
    """Replace spaces in a prompt name so it reads as one token."""
    return name.replace(" ", "_")


_COMPOSABLE_PATTERN = re.compile(rf"\s{AND_TOKEN}\s")


def contains_composable_diffusion(text: str) -> bool:
    """True if text has its own ' AND ' composable diffusion sections."""
    return _COMPOSABLE_PATTERN.search(text) is not None


def apply_common_prompt(text: str, common: str, position: str) -> str:
    """Merge a prompt's text with the common prompt text.

    Args:
        text: The prompt's own text
        common: Common prompt text
        position: "append", "prepend" or "template"

    Returns:
        Merged text; empty parts are skipped rather than leaving stray spaces

    Raises:
        ValueError: If position is not supported

    Examples:
        >>> apply_common_prompt("a cat", "4k", "append")
        'a cat 4k'
        >>> apply_common_prompt("a cat", "photo of [prompt], 4k", "template")
        'photo of a cat, 4k'
    """
    if position == "append":
        return " ".join(part for part in (text, common) if part)
    if position == "prepend":
        return " ".join(part for part in (common, text) if part)
    if position == "template":
        if not common.strip():
            return text
        return common.replace(TEMPLATE_PLACEHOLDER, text)
    raise ValueError(
        f"Unsupported common prompt position '{position}'. "
        f"Supported: append, prepend, template"
    )


def build_weighted_prompt_part(parts: Iterable[Tuple[str, str]]) -> str:
    """Join (text, weight) pairs using composable diffusion syntax.

    Empty texts are dropped.

    Returns:
        Weighted prompt string like "(prompt1):0.7000 AND (prompt2):1"
    """
    return f" {AND_TOKEN} ".join(f"({text}):{weight}" for text, weight in parts if text)


# ============================================================================
# NAMING AND INTERVALS
# ============================================================================


def next_prompt_number(existing_names: List[str]) -> int:
    """Return the number for the next "Prompt N" name.

    Counting starts after the number of existing prompts and skips any
    number already taken.

    Examples:
        >>> next_prompt_number(["Prompt 1", "Prompt 2"])
        3
        >>> next_prompt_number(["Prompt 2"])
        3
        >>> next_prompt_number([])
        1
    """
    taken = set(existing_names)
    number = len(existing_names) + 1
    while f"Prompt {number}" in taken:
        number += 1
    return number


def intervals_overlap(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    """True if two inclusive frame intervals share at least one frame."""
    return a[0] <= b[1] and b[0] <= a[1]


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(value, upper))
