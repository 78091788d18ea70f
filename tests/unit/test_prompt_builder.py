"""Tests for neighbors.core.prompt_builder — portrait prompt construction."""

from __future__ import annotations

import pytest

from neighbors.core.prompt_builder import (
    ACTIVITY_PLACEHOLDER,
    ACTIVITY_PROMPT_TEMPLATE,
    BASE_PROMPT,
    build_prompt,
)


class TestBaselinePrompt:
    """No activity yields the baseline template."""

    @pytest.mark.parametrize("activity", [None, "", "   ", "\n\t"])
    def test_blank_activity_returns_base(self, activity):
        assert build_prompt(activity) == BASE_PROMPT

    def test_default_argument(self):
        assert build_prompt() == BASE_PROMPT

    def test_base_prompt_mentions_reference_photo(self):
        assert "provided photo" in BASE_PROMPT


class TestActivityPrompt:
    """A non-empty activity is interpolated into the extended template."""

    def test_activity_appears_verbatim(self):
        prompt = build_prompt("playing the cello")
        assert "playing the cello" in prompt
        assert prompt != BASE_PROMPT

    def test_extended_prompt_keeps_base_text(self):
        assert build_prompt("surfing").startswith(BASE_PROMPT)

    def test_placeholder_is_replaced(self):
        assert ACTIVITY_PLACEHOLDER in ACTIVITY_PROMPT_TEMPLATE
        assert ACTIVITY_PLACEHOLDER not in build_prompt("gardening")

    def test_activity_is_trimmed(self):
        assert build_prompt("  chess  ") == build_prompt("chess")

    @pytest.mark.parametrize(
        "activity",
        ["{0} {name} %s %(x)d", "baking 🍞", "a" * 2000, "line one\nline two"],
    )
    def test_total_for_unusual_input(self, activity):
        """Formatting characters, emoji and long text never raise."""
        prompt = build_prompt(activity)
        assert activity.strip() in prompt


class TestDeterminism:
    """The same input always yields the same prompt."""

    @pytest.mark.parametrize("activity", [None, "knitting", "rock climbing"])
    def test_repeated_calls_match(self, activity):
        assert build_prompt(activity) == build_prompt(activity)

    def test_distinct_activities_differ(self):
        assert build_prompt("running") != build_prompt("swimming")
