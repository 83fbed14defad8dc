"""Prompt timeline scheduling for frame-based animation.

Describe which prompts are active over which frames, how they fade into one
another and how a shared common prompt is merged in, then ask for the active
prompts, weights and composed prompt text at any frame.
"""

from .models import (
    Commit,
    ComposabilityWarning,
    ImportDiagnostic,
    Origin,
    Overlap,
    Prompt,
    PromptSet,
    Severity,
)
from .core.migration import convert_prompts, normalize
from .core.weights import calculate_weight
from .core.preview import active_prompts, composability_warnings, quick_preview, template_warning
from .core.importer import ImportValidator, parse_prompts_text
from .core.render import RenderedPrompt, render_frame, render_prompt_series
from .core.reconciler import EditReconciler

__version__ = "0.1.0"

__all__ = [
    "Commit",
    "ComposabilityWarning",
    "ImportDiagnostic",
    "Origin",
    "Overlap",
    "Prompt",
    "PromptSet",
    "Severity",
    "convert_prompts",
    "normalize",
    "calculate_weight",
    "active_prompts",
    "composability_warnings",
    "quick_preview",
    "template_warning",
    "ImportValidator",
    "parse_prompts_text",
    "RenderedPrompt",
    "render_frame",
    "render_prompt_series",
    "EditReconciler",
]
