"""Core domain logic for parseq_prompts.

All modules here operate on the canonical PromptSet model. Apart from the
edit reconciler, every function returns new values and never mutates its
inputs.

Modules:
    migration: Upgrade of historical prompt shapes to the v2 format
    editor: Invariant-preserving edits (add, delete, resize, reorder, spacing)
    importer: Parsing of pasted text into new prompts
    weights: Blend weight of a prompt at a frame
    preview: Active prompts, quick preview and advisory warnings
    render: Per-frame composition of the final prompt text
    reconciler: Staged/committed state of the editor
"""

__all__ = [
    "migration",
    "editor",
    "importer",
    "weights",
    "preview",
    "render",
    "reconciler",
]
