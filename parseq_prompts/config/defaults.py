"""Default values and prompt templates.

Every prompt set the package creates from nothing starts from the templates
below, so a document migrated from an older format and a brand new document
look the same.
"""

from ..models import Overlap, Prompt, PromptSet

# Shown by the quick preview when no prompt covers the frame. Never empty, so
# it cannot be mistaken for a prompt with no text.
NO_PROMPT_SENTINEL = "⚠️ No prompt"

# Literal token a template-mode common prompt must contain.
TEMPLATE_PLACEHOLDER = "[prompt]"

# Separates positive from negative text in imported prompts.
NEG_DELIMITER = "--neg"

# Composable diffusion joiner.
AND_TOKEN = "AND"

DEFAULT_NEW_PROMPT_SPAN = 50
DEFAULT_IMPORT_DEBOUNCE_MS = 250
DEFAULT_LAST_FRAME = 100
DEFAULT_LOG_LEVEL = "INFO"


def get_custom_formula_placeholder(number: int) -> str:
    return f"prompt_weight_{number}"


def get_default_prompt(name: str = "Prompt 1", last_frame: int = 0) -> Prompt:
    """Return a prompt active on all frames with no fade."""
    return Prompt(
        name=name,
        positive="",
        negative="",
        all_frames=True,
        from_=0,
        to=last_frame,
        overlap=Overlap(type="none", in_frames=0, out_frames=0,
                        custom=get_custom_formula_placeholder(1)),
    )


def get_default_prompts(last_frame: int) -> PromptSet:
    """Return the single-prompt set used for new and empty documents."""
    return PromptSet(
        format_version="v2",
        enabled=True,
        prompt_list=[get_default_prompt("Prompt 1", last_frame)],
        common_prompt=get_default_prompt("Common", last_frame),
        common_prompt_pos="append",
    )
