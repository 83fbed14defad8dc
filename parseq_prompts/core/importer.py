"""Import of pasted text as new timed prompts.

Two input forms are accepted:

- A frame-indexed mapping, e.g. ``{"0": "a cat --neg blurry", "10": "a dog"}``.
  Syntax is relaxed: keys and values may be unquoted (``{0: a cat, 10: a dog}``).
  Keys are read as written, so ``010`` starts at frame 10.
  Each prompt runs until the frame before the next key; the last one runs to
  the final frame.
- Any other text is a plain list with one prompt per non-blank line, the
  lines sharing the timeline equally.

Text that starts with ``{`` or ends with ``}`` but does not parse as a
mapping is reported as an error instead of being read as lines.

Parsing never raises: problems are reported through the returned
ImportDiagnostic. Accepting an import only appends prompts.

Classes:
    ImportValidator: Debounced re-parse of text that is still being edited

Functions:
    parse_prompts_text: Parse text into an ImportDiagnostic
"""

import json
import math
from typing import Callable, List, Optional

import yaml

from ..config.defaults import DEFAULT_IMPORT_DEBOUNCE_MS
from ..models import ImportDiagnostic, Overlap, Prompt, PromptSet, Severity
from ..utils.debounce import Debouncer
from ..utils.logging import log
from ..utils.prompt_utils import next_prompt_number, parse_leading_int, split_prompt_into_pos_neg

__all__ = [
    'ImportValidator',
    'parse_prompts_text',
    'string_to_prompt',
]

# Private-use character standing in for '#' during the relaxed parse
_HASH_MASK = "\ue000"


class _NotAMapping(Exception):
    pass


class _BadEntry(Exception):
    pass


def _plural(count: int) -> str:
    return f"{count} new prompt{'' if count == 1 else 's'}"


def string_to_prompt(value: str, start_frame: int, end_frame: Optional[int],
                     name: str) -> Prompt:
    """Build a prompt from "positive --neg negative" text."""
    positive, negative = split_prompt_into_pos_neg(value)
    return Prompt(
        name=name,
        positive=positive,
        negative=negative,
        all_frames=False,
        from_=start_frame,
        to=end_frame if end_frame is not None else start_frame + 1,
        overlap=Overlap(type="none", in_frames=0, out_frames=0, custom="prompt_weight_1"),
    )


def _load_mapping(text: str) -> dict:
    stripped = text.strip()
    if not stripped.startswith("{"):
        raise _NotAMapping()
    try:
        parsed = json.loads(stripped)
    except ValueError:
        parsed = _load_relaxed_mapping(stripped)
    if not isinstance(parsed, dict):
        raise _NotAMapping()
    return parsed


def _load_relaxed_mapping(text: str):
    """Read a mapping whose keys and values may be unquoted.

    BaseLoader keeps every scalar a string, so "010" stays frame 10 rather
    than octal 8. '#' is masked while loading so prompt text is never cut off
    as a YAML comment.
    """
    try:
        parsed = yaml.load(text.replace("#", _HASH_MASK), Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise _NotAMapping() from e
    if not isinstance(parsed, dict):
        raise _NotAMapping()
    return {_unmask(key): _unmask(value) for key, value in parsed.items()}


def _unmask(value):
    if isinstance(value, str):
        return value.replace(_HASH_MASK, "#")
    return value


def _mapping_to_prompts(parsed: dict, last_frame: int, first_number: int) -> List[Prompt]:
    prompts: List[Prompt] = []
    number = first_number
    for key, value in parsed.items():
        start_frame = parse_leading_int(key)
        if start_frame is None or not isinstance(value, str):
            raise _BadEntry(f"{key}:{value}")
        start_frame = min(max(0, start_frame), max(0, last_frame))
        if prompts:
            previous = prompts[-1]
            previous.to = max(previous.from_, start_frame - 1)
        prompts.append(string_to_prompt(value, start_frame, None, f"Prompt {number}"))
        number += 1
    if prompts:
        prompts[-1].to = max(prompts[-1].from_, last_frame)
    return prompts


def _lines_to_prompts(text: str, last_frame: int, first_number: int) -> List[Prompt]:
    lines = [line for line in text.split("\n") if line.strip()]
    count = len(lines)
    prompts = []
    for idx, line in enumerate(lines):
        start_frame = math.floor(idx * last_frame / count)
        end_frame = math.floor((idx + 1) * last_frame / count)
        prompts.append(string_to_prompt(line, start_frame, end_frame, f"Prompt {first_number + idx}"))
    return prompts


def parse_prompts_text(text: Optional[str], last_frame: int,
                       existing: PromptSet) -> ImportDiagnostic:
    """Parse pasted text into candidate prompts.

    Args:
        text: Pasted text, or None if nothing has been entered
        last_frame: Final frame of the timeline
        existing: Prompt set the result will be appended to; used for naming

    Returns:
        ImportDiagnostic with the parsed prompts and an info or error message

    Examples:
        >>> from parseq_prompts.config.defaults import get_default_prompts
        >>> d = parse_prompts_text('{"0":"a cat --neg blurry","10":"a dog"}', 20, get_default_prompts(20))
        >>> [(p.positive, p.negative, p.from_, p.to) for p in d.parsed_prompts]
        [('a cat', 'blurry', 0, 9), ('a dog', '', 10, 20)]
    """
    text = text or ""
    first_number = next_prompt_number([p.name for p in existing.prompt_list])

    try:
        parsed = _load_mapping(text)
    except _NotAMapping:
        stripped = text.strip()
        if stripped.startswith("{") or stripped.endswith("}"):
            return ImportDiagnostic(
                severity=Severity.ERROR,
                detail="The input looks like JSON but is not valid. Fix the syntax, "
                       "or remove the leading/trailing curly braces to treat it as plain text.",
            )
        prompts = _lines_to_prompts(text, last_frame, first_number)
        return ImportDiagnostic(
            parsed_prompts=prompts,
            severity=Severity.INFO,
            detail=f"Input will be treated as a plain list with {_plural(len(prompts))}.",
        )

    try:
        prompts = _mapping_to_prompts(parsed, last_frame, first_number)
    except _BadEntry as e:
        return ImportDiagnostic(
            severity=Severity.ERROR,
            detail="The input looks like JSON but has an issue with the following entry, "
                   f'which is not of the expected format "<number>":"<string>": {e}',
        )
    return ImportDiagnostic(
        parsed_prompts=prompts,
        severity=Severity.INFO,
        detail=f"Input will be treated as JSON with {_plural(len(prompts))}.",
    )


class ImportValidator:
    """Re-parses import text once it has stopped changing.

    Every call to :meth:`set_text` supersedes the pending parse, so only the
    most recent text is ever parsed. The latest result is available as
    :attr:`diagnostic` and is also passed to ``on_result``.

    Examples:
        >>> import asyncio
        >>> from parseq_prompts.config.defaults import get_default_prompts
        >>> async def demo():
        ...     v = ImportValidator(lambda: (10, get_default_prompts(10)), debounce_ms=1)
        ...     v.set_text("red")
        ...     v.set_text("red\\nblue")
        ...     await asyncio.sleep(0.05)
        ...     return len(v.diagnostic.parsed_prompts)
        >>> asyncio.run(demo())
        2
    """

    _KEY = "import-text"

    def __init__(self, context: Callable[[], tuple],
                 on_result: Optional[Callable[[ImportDiagnostic], None]] = None,
                 debounce_ms: int = DEFAULT_IMPORT_DEBOUNCE_MS,
                 debouncer: Optional[Debouncer] = None):
        """
        Args:
            context: Returns (last_frame, existing prompt set) at parse time
            on_result: Called with each new diagnostic
            debounce_ms: Quiet period before parsing
            debouncer: Shared debouncer to use instead of creating one
        """
        self._context = context
        self._on_result = on_result
        self._debouncer = debouncer or Debouncer(debounce_ms / 1000.0)
        self.text: Optional[str] = None
        self.diagnostic = ImportDiagnostic()

    @property
    def pending(self) -> bool:
        return self._debouncer.is_pending(self._KEY)

    def set_text(self, text: Optional[str]) -> None:
        self.text = text
        self._debouncer.schedule(self._KEY, self._validate, text)

    def validate_now(self) -> ImportDiagnostic:
        """Parse the current text immediately, dropping any pending parse."""
        self._debouncer.cancel(self._KEY)
        self._validate(self.text)
        return self.diagnostic

    def reset(self) -> None:
        self._debouncer.cancel(self._KEY)
        self.text = None
        self.diagnostic = ImportDiagnostic()

    def _validate(self, text: Optional[str]) -> None:
        if text is None:
            self.diagnostic = ImportDiagnostic()
        else:
            last_frame, existing = self._context()
            self.diagnostic = parse_prompts_text(text, last_frame, existing)
            if self.diagnostic.is_error:
                log.debug(f"Import text rejected: {self.diagnostic.detail}")
        if self._on_result is not None:
            self._on_result(self.diagnostic)
