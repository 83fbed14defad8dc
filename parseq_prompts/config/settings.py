"""Editor settings persistence.

Settings live in a small JSON file. Unknown keys are dropped and invalid
values fall back to their defaults, each producing a warning, so an old or
hand-edited file never prevents the editor from starting.
"""

import json
import os
from dataclasses import asdict, dataclass, fields

from .defaults import (
    DEFAULT_IMPORT_DEBOUNCE_MS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_NEW_PROMPT_SPAN,
)
from ..utils.logging import log

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class EditorSettings:
    """Tunable behaviour of the prompt editor."""
    import_debounce_ms: int = DEFAULT_IMPORT_DEBOUNCE_MS
    new_prompt_span: int = DEFAULT_NEW_PROMPT_SPAN
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def import_debounce_seconds(self) -> float:
        return self.import_debounce_ms / 1000.0


def get_default_settings_path():
    """Return the settings filename used when none is given."""
    return "parseq_prompts_settings.json"


def validate_and_migrate_settings(jdata):
    """
    Validate raw settings data.
    Returns (settings, warnings_list)
    """
    warnings = []
    defaults = EditorSettings()
    if not isinstance(jdata, dict):
        warnings.append(f"Settings must be a JSON object, got {type(jdata).__name__}; using defaults")
        return defaults, warnings

    known = {f.name for f in fields(EditorSettings)}
    for key in jdata:
        if key not in known:
            warnings.append(f"Ignoring unknown setting '{key}'")

    values = asdict(defaults)
    for name in ("import_debounce_ms", "new_prompt_span"):
        if name not in jdata:
            continue
        raw = jdata[name]
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            warnings.append(f"Invalid value for '{name}': {raw!r}; using {values[name]}")
        else:
            values[name] = raw

    if "log_level" in jdata:
        raw = jdata["log_level"]
        if isinstance(raw, str) and raw.upper() in _VALID_LEVELS:
            values["log_level"] = raw.upper()
        else:
            warnings.append(f"Invalid value for 'log_level': {raw!r}; using {values['log_level']}")

    return EditorSettings(**values), warnings


def load_settings(settings_path=None):
    """Load settings from disk, falling back to defaults on any problem."""
    if settings_path is None:
        settings_path = get_default_settings_path()

    if not os.path.exists(settings_path):
        log.debug(f"No settings file at {settings_path}, using defaults")
        return EditorSettings()

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            jdata = json.load(f)
    except (OSError, ValueError) as e:
        log.warning(f"Could not read settings file {settings_path}: {e}; using defaults")
        return EditorSettings()

    settings, warnings = validate_and_migrate_settings(jdata)
    for message in warnings:
        log.warning(message)
    log.set_level(settings.log_level)
    return settings


def save_settings(settings: EditorSettings, settings_path=None):
    """Write settings as JSON. Returns True on success."""
    if settings_path is None:
        settings_path = get_default_settings_path()

    settings_dir = os.path.dirname(settings_path)
    if settings_dir and not os.path.exists(settings_dir):
        os.makedirs(settings_dir, exist_ok=True)

    try:
        with open(settings_path, "w", encoding="utf-8") as f:
            json.dump(asdict(settings), f, ensure_ascii=False, indent=4)
    except OSError as e:
        log.error(f"Error saving settings to {settings_path}: {e}")
        return False
    log.info(f"Saved settings to {settings_path}", log.GREEN)
    return True
