"""Migration of stored prompt data into the canonical v2 prompt set.

Documents written by older versions hold prompts in one of several shapes:

- a bare ``{"positive": ..., "negative": ...}`` pair (single prompt era)
- a bare list of prompts without a version tag (multi-prompt era)
- a v2 set, possibly without ``commonPromptPos`` (added later)

The shape is decided once, by :func:`classify_prompts`, into one of the
tagged variants below. Nothing outside this module inspects raw input shape.
Migration is one-way and never raises.

Functions:
    classify_prompts: Tag raw input with its shape
    convert_prompts: Upgrade any supported shape to a PromptSet
    normalize: Alias of convert_prompts
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Union

from pydantic import ValidationError

from ..config.defaults import get_default_prompts
from ..models import Prompt, PromptSet
from ..utils.logging import log

__all__ = [
    'CanonicalV2',
    'LegacyPair',
    'LegacySequence',
    'Absent',
    'Unrecognized',
    'classify_prompts',
    'convert_prompts',
    'normalize',
]


@dataclass(frozen=True)
class CanonicalV2:
    data: Union[PromptSet, Mapping[str, Any]]


@dataclass(frozen=True)
class LegacyPair:
    positive: str
    negative: str


@dataclass(frozen=True)
class LegacySequence:
    prompts: List[Any]


@dataclass(frozen=True)
class Absent:
    pass


@dataclass(frozen=True)
class Unrecognized:
    data: Any


PromptShape = Union[CanonicalV2, LegacyPair, LegacySequence, Absent, Unrecognized]

_VERSION_KEYS = ("formatVersion", "format", "format_version")


def classify_prompts(raw: Any) -> PromptShape:
    """Tag raw prompt data with the shape it was stored in.

    Examples:
        >>> classify_prompts(None)
        Absent()
        >>> classify_prompts({"positive": "a cat", "negative": ""})
        LegacyPair(positive='a cat', negative='')
        >>> type(classify_prompts([{"name": "Prompt 1"}])).__name__
        'LegacySequence'
    """
    if raw is None:
        return Absent()
    if isinstance(raw, PromptSet):
        return CanonicalV2(raw)
    if isinstance(raw, Mapping):
        if any(raw.get(key) == "v2" for key in _VERSION_KEYS):
            return CanonicalV2(raw)
        if "positive" in raw or "negative" in raw:
            return LegacyPair(
                positive=str(raw.get("positive") or ""),
                negative=str(raw.get("negative") or ""),
            )
        return Unrecognized(raw)
    if isinstance(raw, (list, tuple)):
        return LegacySequence(list(raw))
    return Unrecognized(raw)


def _legacy_prompt(entry: Any, idx: int) -> Prompt:
    if isinstance(entry, Prompt):
        prompt = entry.model_copy(deep=True)
    else:
        prompt = Prompt.model_validate(entry)
    if not prompt.name:
        prompt.name = f"Prompt {idx + 1}"
    return prompt


def _first_enabled_flag(entries: List[Any]) -> bool:
    if not entries:
        return True
    first = entries[0]
    flag = first.enabled if isinstance(first, Prompt) else (
        first.get("enabled") if isinstance(first, Mapping) else None)
    return True if flag is None else bool(flag)


def convert_prompts(old: Any, last_frame: int) -> PromptSet:
    """Upgrade prompts in any supported historical shape to a v2 PromptSet.

    Args:
        old: Stored prompt data (PromptSet, mapping, list or None)
        last_frame: Final frame of the document, used for default spans

    Returns:
        A new PromptSet; the input is never modified

    Examples:
        >>> s = convert_prompts({"positive": "a cat", "negative": "ugly"}, 100)
        >>> s.prompt_list[0].positive, s.prompt_list[0].to
        ('a cat', 100)
    """
    shape = classify_prompts(old)

    if isinstance(shape, CanonicalV2):
        if isinstance(shape.data, PromptSet):
            return shape.data.model_copy(deep=True)
        data = dict(shape.data)
        if data.get("commonPromptPos") is None and data.get("common_prompt_pos") is None:
            data["commonPromptPos"] = "append"
        try:
            return PromptSet.model_validate(data)
        except ValidationError as e:
            log.warning(f"Invalid v2 prompts, using defaults: {e.error_count()} error(s)")
            return get_default_prompts(last_frame)

    prompts = get_default_prompts(last_frame)

    if isinstance(shape, Absent):
        return prompts

    if isinstance(shape, LegacyPair):
        prompts.prompt_list[0].positive = shape.positive
        prompts.prompt_list[0].negative = shape.negative
        log.debug("Migrated single positive/negative prompt to v2")
        return prompts

    if isinstance(shape, LegacySequence):
        try:
            prompts.prompt_list = [_legacy_prompt(p, idx) for idx, p in enumerate(shape.prompts)]
        except ValidationError as e:
            log.warning(f"Invalid legacy prompt list, using defaults: {e.error_count()} error(s)")
            return get_default_prompts(last_frame)
        prompts.enabled = _first_enabled_flag(shape.prompts)
        log.debug(f"Migrated {len(prompts.prompt_list)} legacy prompt(s) to v2")
        return prompts

    log.warning(f"Unrecognised prompt data of type {type(shape.data).__name__}, using defaults")
    return prompts


normalize = convert_prompts
