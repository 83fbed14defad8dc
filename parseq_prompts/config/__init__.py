"""Configuration module for parseq_prompts.

Provides default values, prompt templates and settings persistence.
"""

from .defaults import (
    get_default_prompt,
    get_default_prompts,
)
from .settings import (
    EditorSettings,
    load_settings,
    save_settings,
)

__all__ = [
    # Defaults
    "get_default_prompt",
    "get_default_prompts",
    # Settings
    "EditorSettings",
    "load_settings",
    "save_settings",
]
