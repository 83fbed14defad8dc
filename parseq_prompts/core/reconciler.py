"""Staged/committed state of the prompt editor.

The reconciler owns the working ("staged") copy of a prompt set while the
external owner (the document) holds the last committed copy. Two edit
surfaces feed it: discrete field edits, which have an in-progress phase and
a commit phase, and whole operations such as add, delete, reorder, spacing,
timeline drags and imports, which commit immediately.

Every commit is sent to the owner as a :class:`~parseq_prompts.models.Commit`
tagged ``Origin.INTERNAL``. Owners typically push the value straight back;
such echoes are recognised by their origin and ignored, which breaks the
update cycle without putting any marker inside the prompt set itself.

Classes:
    EditReconciler: Staged/committed state machine for one prompt set
"""

from typing import Any, Callable, List, Optional, Tuple

from ..config.settings import EditorSettings
from ..models import Commit, ComposabilityWarning, Origin, PromptSet
from ..utils.logging import log
from ..utils.prompt_utils import parse_leading_int
from . import editor
from .importer import ImportValidator
from .migration import convert_prompts
from .preview import composability_warnings, quick_preview, template_warning

__all__ = [
    'EDITABLE_FIELDS',
    'EditReconciler',
    'prompts_equal',
]

# Field name -> attribute path on a Prompt
_FIELD_PATHS = {
    "positive": ("positive",),
    "negative": ("negative",),
    "from": ("from_",),
    "to": ("to",),
    "in_frames": ("overlap", "in_frames"),
    "out_frames": ("overlap", "out_frames"),
    "custom": ("overlap", "custom"),
}
EDITABLE_FIELDS = tuple(_FIELD_PATHS)
_TEXT_FIELDS = ("positive", "negative", "custom")

FieldKey = Tuple[Optional[int], str]


def prompts_equal(a: Optional[PromptSet], b: Optional[PromptSet]) -> bool:
    """Structural equality of two prompt sets."""
    if a is None or b is None:
        return a is b
    return a.model_dump() == b.model_dump()


def _prompt_at(prompt_set: PromptSet, index: Optional[int]):
    if index is None:
        return prompt_set.common_prompt
    if 0 <= index < len(prompt_set.prompt_list):
        return prompt_set.prompt_list[index]
    return None


def _get_field(prompt_set: PromptSet, index: Optional[int], field: str) -> Any:
    target = _prompt_at(prompt_set, index)
    if target is None:
        return None
    for attr in _FIELD_PATHS[field]:
        target = getattr(target, attr)
    return target


def _with_field(prompt_set: PromptSet, index: Optional[int], field: str, value: Any) -> PromptSet:
    new_set = prompt_set.model_copy(deep=True)
    target = _prompt_at(new_set, index)
    if target is None:
        return new_set
    *parents, attr = _FIELD_PATHS[field]
    for parent in parents:
        target = getattr(target, parent)
    setattr(target, attr, value)
    return new_set


def _check_field(index: Optional[int], field: str) -> None:
    if field not in _FIELD_PATHS:
        raise ValueError(f"Unsupported field '{field}'. Supported: {', '.join(EDITABLE_FIELDS)}")
    if index is None and field not in ("positive", "negative"):
        raise ValueError(f"The common prompt has no editable '{field}' field")


class EditReconciler:
    """Keeps the staged prompt set and the owner's committed copy convergent.

    Attributes:
        committed: Last prompt set received from the owner; staged is
            dirty while it differs from this
        staged: Working copy being edited
        last_frame: Final frame of the timeline
        warnings: Composability warnings for the staged set
        importer: Debounced validator for pasted import text

    Examples:
        >>> commits, dirty = [], []
        >>> r = EditReconciler(None, 100, commits.append, dirty.append)
        >>> r.add_prompt()
        >>> [p.name for p in r.staged.prompt_list], dirty
        (['Prompt 1', 'Prompt 2'], [True])
        >>> r.receive(commits[-1])  # echo of our own commit
        False
    """

    def __init__(self, initial_prompts: Any, last_frame: int,
                 commit_change: Callable[[Commit], None],
                 mark_dirty: Callable[[bool], None],
                 keyframe_lock: str = "frames",
                 bpm: float = 140.0,
                 fps: float = 20.0,
                 settings: Optional[EditorSettings] = None):
        """Initialize from the owner's current prompts.

        Args:
            initial_prompts: PromptSet, Commit (of any origin) or legacy data
            last_frame: Final frame of the timeline
            commit_change: Owner hook receiving every commit
            mark_dirty: Owner hook told whenever staged/committed equality changes
            keyframe_lock: Unit for frame/time display, passed through untouched
            bpm: Beats per minute, passed through untouched
            fps: Frames per second, passed through untouched
            settings: Editor settings; defaults if omitted
        """
        self.last_frame = last_frame
        self.keyframe_lock = keyframe_lock
        self.bpm = bpm
        self.fps = fps
        self.settings = settings or EditorSettings()
        self._commit_change = commit_change
        self._mark_dirty = mark_dirty

        if isinstance(initial_prompts, Commit):
            initial_prompts = initial_prompts.prompts
        self.committed = convert_prompts(initial_prompts, last_frame)
        self.staged = self.committed.model_copy(deep=True)
        self._last_commit = self.committed.model_copy(deep=True)
        self._dirty = False
        self._unparseable: set = set()
        self.warnings: List[ComposabilityWarning] = composability_warnings(self.staged, last_frame)
        self.importer = ImportValidator(
            context=lambda: (self.last_frame, self.staged),
            debounce_ms=self.settings.import_debounce_ms,
        )

    # ── owner side ───────────────────────────────────────────────────────────

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def receive(self, value: Any) -> bool:
        """Take a new committed value from the owner.

        Echoes of this reconciler's own commits are ignored. Anything else
        (a document load, a version revert, another editor) replaces both the
        committed and the staged copy.

        Returns:
            True if the staged copy was replaced
        """
        if isinstance(value, Commit):
            if value.origin == Origin.INTERNAL:
                log.debug("Ignoring echo of own prompt commit")
                return False
            value = value.prompts
        log.debug("Resetting prompts from external change")
        self.committed = convert_prompts(value, self.last_frame)
        self.staged = self.committed.model_copy(deep=True)
        self._last_commit = self.committed.model_copy(deep=True)
        self._unparseable.clear()
        self._refresh()
        return True

    def set_last_frame(self, last_frame: int) -> None:
        """Change the timeline length.

        Prompts reaching past a shorter timeline are pulled back inside it and
        the result is committed; otherwise only the warnings are refreshed.
        """
        self.last_frame = last_frame
        fitted = editor.fit_to_timeline(self.staged, last_frame)
        if prompts_equal(fitted, self.staged):
            self._refresh()
            return
        log.debug(f"Fitting prompts to shortened timeline ending at frame {last_frame}")
        self._commit(fitted)

    def _commit(self, new_set: PromptSet) -> None:
        self.staged = new_set
        self._last_commit = new_set.model_copy(deep=True)
        self._commit_change(Commit(prompts=new_set.model_copy(deep=True), origin=Origin.INTERNAL))
        self._refresh()

    def _refresh(self) -> None:
        self.warnings = composability_warnings(self.staged, self.last_frame)
        for warning in self.warnings:
            log.debug(warning.message)
        dirty = not prompts_equal(self.staged, self.committed)
        if dirty != self._dirty:
            self._dirty = dirty
            self._mark_dirty(dirty)

    # ── derived views ────────────────────────────────────────────────────────

    def quick_preview(self, frame: int) -> str:
        return quick_preview(self.staged, frame, self.last_frame)

    @property
    def template_warning(self) -> Optional[str]:
        return template_warning(self.staged)

    # ── whole operations (commit immediately) ────────────────────────────────

    def add_prompt(self) -> None:
        self._commit(editor.add_prompt(self.staged, self.last_frame, self.settings.new_prompt_span))

    def delete_prompt(self, index: int) -> None:
        self._commit(editor.delete_prompt(self.staged, index))

    def resize_prompt(self, index: int, field: str, value: int) -> None:
        self._commit(editor.resize_prompt(self.staged, index, field, value, self.last_frame))

    def reorder_prompts(self) -> None:
        self._commit(editor.reorder_prompts(self.staged))

    def evenly_space(self, overlap_frames: int = 0, last_frame: Optional[int] = None) -> None:
        target = self.last_frame if last_frame is None else min(last_frame, self.last_frame)
        self._commit(editor.evenly_space_prompts(self.staged, target, overlap_frames))

    def set_enabled(self, enabled: bool) -> None:
        self._commit(editor.set_enabled(self.staged, enabled))

    def set_all_frames(self, index: int, all_frames: bool) -> None:
        self._commit(editor.set_all_frames(self.staged, index, all_frames))

    def set_overlap_type(self, index: int, overlap_type: str) -> None:
        self._commit(editor.set_overlap_type(self.staged, index, overlap_type))

    def set_common_prompt_pos(self, position: str) -> None:
        self._commit(editor.set_common_prompt_pos(self.staged, position))

    def drag_end(self, spans) -> None:
        """Commit intervals reported by the draggable timeline view."""
        self._commit(editor.apply_timeline_drag(self.staged, spans, self.last_frame))

    def accept_import(self) -> bool:
        """Append the prompts parsed from the import text.

        The current text is parsed again, so a parse still waiting on the
        debounce never gets lost. Nothing is committed if the text is invalid
        or yields no prompts.
        """
        diagnostic = self.importer.validate_now()
        self.importer.reset()
        if diagnostic.is_error or not diagnostic.parsed_prompts:
            return False
        self._commit(editor.append_prompts(self.staged, diagnostic.parsed_prompts))
        log.info(f"Imported {len(diagnostic.parsed_prompts)} prompt(s)", log.GREEN)
        return True

    def cancel_import(self) -> None:
        self.importer.reset()

    # ── field edits (in-progress, then commit or cancel) ─────────────────────

    def edit_field(self, index: Optional[int], field: str, raw: Any) -> None:
        """Update a field in the staged copy only.

        Numeric fields take the leading integer of raw; text that does not
        start with one is ignored and the field is remembered as unparseable
        until the next valid edit, commit or cancel.
        """
        _check_field(index, field)
        key: FieldKey = (index, field)
        if field in _TEXT_FIELDS:
            value = "" if raw is None else str(raw)
        else:
            value = parse_leading_int(raw)
            if value is None:
                self._unparseable.add(key)
                return
        self._unparseable.discard(key)
        self.staged = _with_field(self.staged, index, field, value)
        self._refresh()

    def commit_field(self, index: Optional[int], field: str) -> None:
        """Finish an in-progress edit: clamp numeric values and commit.

        A numeric field whose last edit was unparseable gets the committed
        value back before committing.
        """
        _check_field(index, field)
        key: FieldKey = (index, field)
        if key in self._unparseable:
            self._unparseable.discard(key)
            self.staged = self._restored(index, field)
        if field in editor.INTERVAL_FIELDS:
            value = _get_field(self.staged, index, field)
            if value is not None:
                self._commit(editor.resize_prompt(self.staged, index, field, value, self.last_frame))
                return
        self._commit(self.staged)

    def cancel_field(self, index: Optional[int], field: str) -> None:
        """Abandon an in-progress edit, restoring the last committed value."""
        _check_field(index, field)
        self._unparseable.discard((index, field))
        self.staged = self._restored(index, field)
        self._refresh()

    def _restored(self, index: Optional[int], field: str) -> PromptSet:
        # Last value sent to or received from the owner
        if _prompt_at(self._last_commit, index) is None:
            return self.staged
        return _with_field(self.staged, index, field, _get_field(self._last_commit, index, field))
