"""Tests for the transition registry."""
import logging

import pytest

from transval.core.registry import TransitionRegistry
from transval.shared.errors import (
    EmptyInputError,
    ErrorCode,
    IllegalTransitionError,
    RuleParseError,
    TargetEmptyError,
    WrongInputError,
)
from transval.shared.models import RuleSyntax

SCENARIO_RULES = "1=>2,3,4;2=>1,3;6=>7,8;7=>6,8"


@pytest.fixture
def registry():
    reg = TransitionRegistry()
    reg.set("n", SCENARIO_RULES)
    return reg


class TestSet:
    """Tests for TransitionRegistry.set."""

    def test_set_and_transitions(self):
        reg = TransitionRegistry()
        reg.set("test", "1=>2,3;2=>3")
        assert reg.transitions("test") == {1: [2, 3], 2: [3]}

    def test_set_merges_additively(self):
        """Test that a second set appends instead of replacing."""
        reg = TransitionRegistry()
        reg.set("x", "1=>2")
        reg.set("x", "1=>3")
        assert reg.transitions("x")[1] == [2, 3]

    def test_merge_keeps_duplicates_and_new_keys(self):
        reg = TransitionRegistry()
        reg.set("x", "1=>2;2=>1")
        reg.set("x", "1=>2;3=>1")
        assert reg.transitions("x") == {1: [2, 2], 2: [1], 3: [1]}

    def test_original_is_first_text(self):
        reg = TransitionRegistry()
        reg.set("x", "1=>2")
        reg.set("x", "1=>3")
        assert reg.original("x") == "1=>2"

    def test_invalid_input_raises(self):
        reg = TransitionRegistry()
        with pytest.raises(WrongInputError):
            reg.set("test", "invalid=>input")
        assert "test" not in reg

    def test_failed_set_leaves_existing_untouched(self):
        """Test that a parse error does not mutate the stored rule set."""
        reg = TransitionRegistry()
        reg.set("x", "1=>2")
        with pytest.raises(TargetEmptyError):
            reg.set("x", "1=>3;2=>")
        assert reg.transitions("x") == {1: [2]}
        assert reg.original("x") == "1=>2"

    def test_empty_rules_create_empty_set(self):
        reg = TransitionRegistry()
        reg.set("x", "")
        assert reg.transitions("x") == {}
        assert reg.original("x") == ""

    def test_strict_syntax_rejects_empty(self):
        reg = TransitionRegistry(syntax=RuleSyntax(allow_empty=False))
        with pytest.raises(EmptyInputError):
            reg.set("x", "")
        assert reg.transitions("x") is None

    def test_custom_syntax(self):
        reg = TransitionRegistry(syntax=RuleSyntax(rule_splitter="|", transition_splitter="->"))
        reg.set("x", "1->2,3|3->1")
        assert reg.is_transition_valid("x", 3, 1) is True

    def test_names_are_independent(self):
        reg = TransitionRegistry()
        reg.set("a", "1=>2")
        reg.set("b", "1=>3")
        assert reg.allowed_to("a", 1) == [2]
        assert reg.allowed_to("b", 1) == [3]
        assert reg.names() == ["a", "b"]
        assert len(reg) == 2


class TestDelete:
    """Tests for TransitionRegistry.delete."""

    def test_delete(self, registry):
        registry.delete("n")
        assert registry.transitions("n") is None
        assert registry.is_transition_valid("n", 1, 2) is False
        assert "n" not in registry

    def test_delete_unknown_is_noop(self, registry):
        registry.delete("missing")
        registry.delete("missing")
        assert registry.names() == ["n"]

    def test_set_after_delete_starts_fresh(self, registry):
        registry.delete("n")
        registry.set("n", "1=>9")
        assert registry.transitions("n") == {1: [9]}
        assert registry.original("n") == "1=>9"


class TestQueries:
    """Tests for the lookup operations."""

    def test_scenario(self, registry):
        assert registry.is_transition_valid("n", 1, 2) is True
        assert registry.is_transition_valid("n", 1, 1) is False
        assert registry.is_transition_valid("n", 10, 1) is False
        assert registry.allowed_to("n", 6) == [7, 8]

    def test_unknown_name(self, registry):
        assert registry.is_transition_valid("unknown", 1, 2) is False
        assert registry.allowed_to("unknown", 1) is None
        assert registry.transitions("unknown") is None
        assert registry.original("unknown") is None

    def test_unknown_from_state(self, registry):
        assert registry.allowed_to("n", 4) is None

    def test_validity_matches_allowed_to(self, registry):
        """Test that validity is exactly membership in allowed_to."""
        for from_state in range(-1, 10):
            allowed = registry.allowed_to("n", from_state) or []
            for to_state in range(-1, 10):
                assert registry.is_transition_valid("n", from_state, to_state) is (to_state in allowed)

    def test_allowed_to_is_stored_list(self, registry):
        assert registry.allowed_to("n", 1) is registry.transitions("n")[1]


class TestAssertTransition:
    """Tests for TransitionRegistry.assert_transition."""

    def test_valid_does_not_raise(self, registry):
        registry.assert_transition("n", 7, 6)  # should not raise

    def test_invalid_raises(self, registry):
        with pytest.raises(IllegalTransitionError, match=r"1 -> 5.*\[2, 3, 4\]"):
            registry.assert_transition("n", 1, 5)

    def test_unknown_name_raises(self, registry):
        with pytest.raises(IllegalTransitionError, match=r"Allowed from 1: \[\]"):
            registry.assert_transition("other", 1, 2)


class TestLogging:
    """Tests for the events the registry logs."""

    def test_rejected_set_logs_warning(self, caplog):
        reg = TransitionRegistry()
        with caplog.at_level(logging.DEBUG, logger="transval"):
            with pytest.raises(WrongInputError):
                reg.set("x", "1=>2=>3")
        records = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(records) == 1
        assert "name=x" in records[0].getMessage()
        assert "error=WRONG_INPUT" in records[0].getMessage()

    def test_oversized_state_rejected_and_logged(self, caplog):
        """Test that a literal too long for int() is a logged parse error."""
        reg = TransitionRegistry()
        reg.set("x", "1=>2")
        with caplog.at_level(logging.DEBUG, logger="transval"):
            with pytest.raises(RuleParseError) as exc_info:
                reg.set("x", "1" * 5000 + "=>1")
        assert exc_info.value.code is ErrorCode.WRONG_INPUT
        assert reg.transitions("x") == {1: [2]}
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "error=WRONG_INPUT" in warnings[0]

    def test_successful_set_logs_debug(self, caplog):
        reg = TransitionRegistry()
        with caplog.at_level(logging.DEBUG, logger="transval"):
            reg.set("x", "1=>2;3=>4")
        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
        assert any("action=set" in m and "states=2" in m for m in messages)
