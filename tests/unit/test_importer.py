"""Unit tests for importing pasted text as prompts."""

import asyncio

import pytest

from parseq_prompts.core.importer import ImportValidator, parse_prompts_text, string_to_prompt
from parseq_prompts.models import PromptSet, Severity


def summary(diagnostic):
    return [(p.name, p.positive, p.negative, p.from_, p.to) for p in diagnostic.parsed_prompts]


class TestStringToPrompt:
    """Test building a prompt from one line of text."""

    def test_split_and_defaults(self):
        prompt = string_to_prompt("a cat --neg blurry", 5, 9, "Prompt 3")
        assert (prompt.positive, prompt.negative) == ("a cat", "blurry")
        assert (prompt.from_, prompt.to) == (5, 9)
        assert prompt.all_frames is False
        assert prompt.overlap.type == "none"

    def test_missing_end(self):
        assert string_to_prompt("x", 5, None, "Prompt 1").to == 6


class TestMappingImport:
    """Test frame-indexed mapping input."""

    def test_json_mapping(self, default_prompts):
        diagnostic = parse_prompts_text('{"0":"a cat --neg blurry","10":"a dog"}', 20, default_prompts)
        assert diagnostic.severity == Severity.INFO
        assert summary(diagnostic) == [
            ("Prompt 2", "a cat", "blurry", 0, 9),
            ("Prompt 3", "a dog", "", 10, 20),
        ]
        assert diagnostic.detail == "Input will be treated as JSON with 2 new prompts."

    def test_unquoted_keys_and_values(self, default_prompts):
        diagnostic = parse_prompts_text("{0: a cat, 10: a dog}", 20, default_prompts)
        assert not diagnostic.is_error
        assert [(p.positive, p.from_, p.to) for p in diagnostic.parsed_prompts] == [
            ("a cat", 0, 9), ("a dog", 10, 20),
        ]

    def test_zero_padded_keys_read_as_decimal(self, default_prompts):
        diagnostic = parse_prompts_text("{000: a cat, 010: a dog}", 20, default_prompts)
        assert [(p.positive, p.from_, p.to) for p in diagnostic.parsed_prompts] == [
            ("a cat", 0, 9), ("a dog", 10, 20),
        ]

    def test_unquoted_values_stay_text(self, default_prompts):
        diagnostic = parse_prompts_text("{0: yes, 10: 1.5}", 20, default_prompts)
        assert [p.positive for p in diagnostic.parsed_prompts] == ["yes", "1.5"]

    def test_hash_kept_in_unquoted_value(self, default_prompts):
        diagnostic = parse_prompts_text("{\n0: a cat #cute,\n10: a dog\n}", 20, default_prompts)
        assert [(p.positive, p.from_) for p in diagnostic.parsed_prompts] == [
            ("a cat #cute", 0), ("a dog", 10),
        ]

    def test_hash_kept_in_json_value(self, default_prompts):
        diagnostic = parse_prompts_text('{"0": "a cat #cute"}', 20, default_prompts)
        assert diagnostic.parsed_prompts[0].positive == "a cat #cute"

    def test_single_entry_message(self, default_prompts):
        diagnostic = parse_prompts_text('{"0": "a cat"}', 20, default_prompts)
        assert diagnostic.detail == "Input will be treated as JSON with 1 new prompt."

    def test_start_beyond_last_frame_clamped(self, default_prompts):
        diagnostic = parse_prompts_text('{"0": "a", "500": "b"}', 100, default_prompts)
        assert [(p.from_, p.to) for p in diagnostic.parsed_prompts] == [(0, 99), (100, 100)]

    def test_naming_continues_after_existing(self, three_prompts):
        diagnostic = parse_prompts_text('{"0": "a", "50": "b"}', 100, three_prompts)
        assert [p.name for p in diagnostic.parsed_prompts] == ["Prompt 4", "Prompt 5"]

    def test_non_numeric_key_is_error(self, default_prompts):
        diagnostic = parse_prompts_text('{"0": "a cat", "x": "b"}', 20, default_prompts)
        assert diagnostic.is_error
        assert diagnostic.parsed_prompts == []
        assert diagnostic.detail.endswith("x:b")

    def test_non_string_value_is_error(self, default_prompts):
        diagnostic = parse_prompts_text('{"0": 5}', 20, default_prompts)
        assert diagnostic.is_error
        assert "0:5" in diagnostic.detail


class TestMalformedInput:
    """Test text that looks like a mapping but does not parse."""

    @pytest.mark.parametrize("text", ["{bad", "x}", '{"0": "a"', '  {"0": [}  '])
    def test_reported_as_error(self, text, default_prompts):
        diagnostic = parse_prompts_text(text, 20, default_prompts)
        assert diagnostic.is_error
        assert diagnostic.parsed_prompts == []
        assert "looks like JSON but is not valid" in diagnostic.detail


class TestLineImport:
    """Test plain list input."""

    def test_lines_share_timeline(self, default_prompts):
        diagnostic = parse_prompts_text("red\nblue", 10, default_prompts)
        assert [(p.positive, p.from_, p.to) for p in diagnostic.parsed_prompts] == [
            ("red", 0, 5), ("blue", 5, 10),
        ]
        assert diagnostic.detail == "Input will be treated as a plain list with 2 new prompts."

    def test_blank_lines_ignored(self, default_prompts):
        diagnostic = parse_prompts_text("red\n\n   \nblue --neg dull\n", 10, default_prompts)
        assert summary(diagnostic) == [
            ("Prompt 2", "red", "", 0, 5),
            ("Prompt 3", "blue", "dull", 5, 10),
        ]

    def test_empty_text(self, default_prompts):
        diagnostic = parse_prompts_text("", 10, default_prompts)
        assert not diagnostic.is_error
        assert diagnostic.parsed_prompts == []

    def test_none_text(self, default_prompts):
        assert parse_prompts_text(None, 10, default_prompts).parsed_prompts == []

    def test_existing_prompts_untouched(self, three_prompts):
        before = three_prompts.model_dump()
        parse_prompts_text("red\nblue", 100, three_prompts)
        assert three_prompts.model_dump() == before


class TestImportValidator:
    """Test debounced validation."""

    def test_only_latest_text_parsed(self):
        results = []

        async def run():
            validator = ImportValidator(lambda: (10, PromptSet()), on_result=results.append,
                                        debounce_ms=5)
            validator.set_text("red")
            validator.set_text("red\nblue")
            assert validator.pending
            await asyncio.sleep(0.05)
            return validator

        validator = asyncio.run(run())
        assert not validator.pending
        assert len(results) == 1
        assert len(validator.diagnostic.parsed_prompts) == 2

    def test_validate_now_skips_wait(self):
        async def run():
            validator = ImportValidator(lambda: (10, PromptSet()), debounce_ms=10_000)
            validator.set_text("{bad")
            diagnostic = validator.validate_now()
            assert not validator.pending
            return diagnostic

        assert asyncio.run(run()).is_error

    def test_context_read_at_parse_time(self):
        state = {"last_frame": 10}
        validator = ImportValidator(lambda: (state["last_frame"], PromptSet()))
        validator.text = "red\nblue"
        state["last_frame"] = 40
        diagnostic = validator.validate_now()
        assert diagnostic.parsed_prompts[-1].to == 40

    def test_reset(self):
        validator = ImportValidator(lambda: (10, PromptSet()))
        validator.text = "red"
        validator.validate_now()
        validator.reset()
        assert validator.text is None
        assert validator.diagnostic.parsed_prompts == []
