import pytest

from zephyr_sdk.tools.zephyr_scale.gherkin import (
    BddStep,
    bdd_text_or_original,
    parse_steps,
    to_canonical_bdd,
)


class TestToCanonicalBdd:
    """Markdown to Given/When/Then conversion"""

    def test_markdown_bullets_become_keyword_lines(self):
        text = "- given a logged in user\n- when they open settings\n- then the profile tab is shown"
        assert to_canonical_bdd(text) == (
            "Given a logged in user\n"
            "When they open settings\n"
            "Then the profile tab is shown"
        )

    def test_keywords_are_normalized_case_insensitively(self):
        assert to_canonical_bdd("GIVEN x\nwHeN y\nthen z\nand w\nBUT v") == (
            "Given x\nWhen y\nThen z\nAnd w\nBut v"
        )

    def test_numbered_and_nested_markers_are_stripped(self):
        text = "1. Given a cart\n2. When I pay\n* - 3. Then I get a receipt"
        assert to_canonical_bdd(text) == "Given a cart\nWhen I pay\nThen I get a receipt"

    def test_continuation_lines_join_previous_step(self):
        text = "Given a user with\n  an expired password\nWhen they log in\nThen they are asked to\nreset it"
        assert to_canonical_bdd(text) == (
            "Given a user with an expired password\n"
            "When they log in\n"
            "Then they are asked to reset it"
        )

    def test_lines_before_first_step_are_ignored(self):
        text = "# Login\nScenario: happy path\nGiven a user\nThen it works"
        assert to_canonical_bdd(text) == "Given a user\nThen it works"

    def test_keyword_must_be_a_whole_word(self):
        # "Thence" is not a Then step, so it folds into the Given step
        assert to_canonical_bdd("Given a\nThence b") == "Given a Thence b"

    def test_colon_after_keyword_is_accepted(self):
        assert to_canonical_bdd("Given: a user") == "Given a user"

    def test_blank_lines_are_skipped(self):
        assert to_canonical_bdd("Given a\n\n\nWhen b") == "Given a\nWhen b"

    @pytest.mark.parametrize("text", [
        "- given a\n- when b\n- then c",
        "Scenario: x\n1. GIVEN a\n   more\n2. THEN c",
        "Given a\nAnd b\nBut c",
    ])
    def test_conversion_is_idempotent(self, text):
        once = to_canonical_bdd(text)
        assert to_canonical_bdd(once) == once

    def test_no_steps_gives_empty_string(self):
        assert to_canonical_bdd("just some notes\nwithout steps") == ""
        assert to_canonical_bdd("") == ""
        assert to_canonical_bdd(None) == ""


class TestParseSteps:

    def test_returns_ordered_steps(self):
        assert parse_steps("- Given a\n- When b") == [BddStep("Given", "a"), BddStep("When", "b")]

    def test_bare_keyword_renders_without_trailing_space(self):
        steps = parse_steps("Given a\nAnd")
        assert steps[-1] == BddStep("And", "")
        assert steps[-1].render() == "And"


class TestBddTextOrOriginal:

    def test_falls_back_to_original_text(self):
        text = "Plain description, no steps here"
        assert bdd_text_or_original(text) == text

    def test_uses_converted_text_when_steps_found(self):
        assert bdd_text_or_original("* given a") == "Given a"
