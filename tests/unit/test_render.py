"""Unit tests for per-frame prompt composition."""

from parseq_prompts.core.render import RenderedPrompt, render_frame, render_prompt_series
from parseq_prompts.models import PromptSet


class TestRenderFrame:
    """Test composing a single frame."""

    def test_single_prompt_unweighted(self, three_prompts):
        rendered = render_frame(three_prompts, 10, 100)
        assert rendered == RenderedPrompt(positive="a cat", negative="blurry")

    def test_common_prompt_appended(self, three_prompts):
        three_prompts.common_prompt.positive = "4k"
        three_prompts.common_prompt.negative = "lowres"
        rendered = render_frame(three_prompts, 40, 100)
        assert rendered.positive == "a dog 4k"
        assert rendered.negative == "lowres"

    def test_common_prompt_prepended(self, three_prompts):
        three_prompts.common_prompt.positive = "4k"
        three_prompts.common_prompt_pos = "prepend"
        assert render_frame(three_prompts, 70, 100).positive == "4k a bird"

    def test_common_prompt_template(self, three_prompts):
        three_prompts.common_prompt.positive = "photo of [prompt], 4k"
        three_prompts.common_prompt_pos = "template"
        rendered = render_frame(three_prompts, 0, 100)
        assert rendered.positive == "photo of a cat, 4k"
        assert rendered.negative == "blurry"

    def test_overlap_weighted(self, make_prompt):
        prompt_set = PromptSet(prompt_list=[
            make_prompt("Prompt 1", 0, 50, positive="a cat", overlap_type="linear", out_frames=10),
            make_prompt("Prompt 2", 40, 100, positive="a dog", overlap_type="linear", in_frames=10),
        ])
        rendered = render_frame(prompt_set, 45, 100)
        assert rendered.positive == "(a cat):0.5000 AND (a dog):0.5000"
        assert rendered.negative == ""

    def test_single_fading_prompt_weighted(self, make_prompt):
        prompt_set = PromptSet(prompt_list=[
            make_prompt("Prompt 1", 0, 10, positive="a cat", overlap_type="linear", in_frames=4),
        ])
        assert render_frame(prompt_set, 2, 100).positive == "(a cat):0.5000"

    def test_custom_weight_kept_verbatim(self, make_prompt):
        prompt_set = PromptSet(prompt_list=[
            make_prompt("Prompt 1", 0, 10, positive="a cat", overlap_type="custom", custom="prompt_weight_1"),
        ])
        assert render_frame(prompt_set, 2, 100).positive == "(a cat):${prompt_weight_1}"

    def test_no_active_prompt(self, make_prompt):
        prompt_set = PromptSet(prompt_list=[make_prompt("Prompt 1", 10, 20, positive="a cat")])
        assert render_frame(prompt_set, 50, 100) == RenderedPrompt(positive="", negative="")

    def test_disabled_set(self, three_prompts):
        three_prompts.enabled = False
        assert render_frame(three_prompts, 10, 100) is None

    def test_disabled_prompt_skipped(self, make_prompt):
        first = make_prompt("Prompt 1", 0, 50, positive="a cat")
        first.enabled = False
        prompt_set = PromptSet(prompt_list=[first, make_prompt("Prompt 2", 0, 50, positive="a dog")])
        assert render_frame(prompt_set, 10, 100).positive == "a dog"


class TestRenderedPrompt:
    """Test the single-string prompt form."""

    def test_with_negative(self):
        assert RenderedPrompt("a cat", "blurry").deforum_prompt == "a cat --neg blurry"

    def test_without_negative(self):
        assert RenderedPrompt("a cat", "").deforum_prompt == "a cat"


class TestRenderPromptSeries:
    """Test rendering the whole timeline."""

    def test_one_entry_per_frame(self, three_prompts):
        series = render_prompt_series(three_prompts, 100)
        assert len(series) == 101
        assert list(series.index[:3]) == [0, 1, 2]
        assert series[0] == "a cat --neg blurry"
        assert series[45] == "a dog"
        assert series[100] == "a bird"

    def test_disabled_set_renders_empty(self, three_prompts):
        three_prompts.enabled = False
        series = render_prompt_series(three_prompts, 10)
        assert (series == "").all()
