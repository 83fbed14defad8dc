"""Pytest configuration for parseq_prompts tests.

This file is automatically loaded by pytest before running tests.
It configures the Python path so that the parseq_prompts package can be
imported without installation, and provides shared prompt fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add the project root directory to Python path
# This allows `from parseq_prompts import ...` to work
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parseq_prompts.config.defaults import get_default_prompts  # noqa: E402
from parseq_prompts.models import Overlap, Prompt, PromptSet  # noqa: E402


def _make_prompt(name, start, end, positive="", negative="", all_frames=False,
                overlap_type="none", in_frames=0, out_frames=0, custom="prompt_weight_1"):
    return Prompt(
        name=name,
        positive=positive,
        negative=negative,
        all_frames=all_frames,
        from_=start,
        to=end,
        overlap=Overlap(type=overlap_type, in_frames=in_frames,
                        out_frames=out_frames, custom=custom),
    )


@pytest.fixture
def make_prompt():
    """Factory for prompts with an interval and optional fade."""
    return _make_prompt


@pytest.fixture
def last_frame():
    return 100


@pytest.fixture
def default_prompts(last_frame):
    return get_default_prompts(last_frame)


@pytest.fixture
def three_prompts():
    """Three consecutive prompts over frames 0-100."""
    return PromptSet(
        prompt_list=[
            _make_prompt("Prompt 1", 0, 30, positive="a cat", negative="blurry"),
            _make_prompt("Prompt 2", 31, 60, positive="a dog"),
            _make_prompt("Prompt 3", 61, 100, positive="a bird"),
        ],
    )
