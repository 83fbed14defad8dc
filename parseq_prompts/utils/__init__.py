"""
parseq_prompts utility modules - pure functions organized by domain.

Modules:
    prompt_utils: Prompt text splitting, weight formatting, naming helpers
    debounce: Cancellable delayed callbacks on the asyncio event loop
    logging: Coloured console logging
"""

__all__ = [
    "prompt_utils",
    "debounce",
    "logging",
]
