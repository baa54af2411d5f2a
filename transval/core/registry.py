"""Transition registry – named rule sets and transition lookups."""
import logging
from typing import Dict, List, Optional

from transval.core.parser import parse
from transval.shared.errors import ErrorCode, IllegalTransitionError, RuleParseError
from transval.shared.logging_ import log_rule_event
from transval.shared.models import RuleSet, RuleSyntax

logger = logging.getLogger(__name__)


class TransitionRegistry:
    """
    Stores rule sets by name and answers "may state A move to state B?".

    ``set`` is an upsert-merge: calling it again for an existing name appends
    the new targets to the stored ones instead of replacing them, so a rule
    set can be assembled from several fragments. Targets are kept in order
    and never deduplicated.

    Not thread-safe; callers sharing an instance across threads must
    serialize ``set``/``delete`` against reads themselves.
    """

    def __init__(self, syntax: Optional[RuleSyntax] = None):
        self.syntax = syntax
        self._rule_sets: Dict[str, RuleSet] = {}

    def set(self, name: str, rules: str) -> None:
        """
        Parse ``rules`` and merge them into the rule set called ``name``.

        Raises:
            RuleParseError: If ``rules`` does not parse; the stored rule set
                for ``name`` is left as it was
        """
        try:
            parsed = parse(rules, self.syntax)
        except RuleParseError as exc:
            log_rule_event(
                logger, name, "set", "rejected",
                rules=rules, error_code=exc.code, message=exc.message,
            )
            raise

        rule_set = self._rule_sets.get(name)
        if rule_set is None:
            rule_set = RuleSet(original=rules)
            self._rule_sets[name] = rule_set
        rule_set.merge(parsed)

        log_rule_event(logger, name, "set", "ok", rules=rules, state_count=rule_set.rule_count)

    def delete(self, name: str) -> None:
        """Remove the rule set called ``name``; unknown names are ignored."""
        removed = self._rule_sets.pop(name, None)
        log_rule_event(logger, name, "delete", "ok" if removed else "missing")

    def is_transition_valid(self, name: str, from_state: int, to_state: int) -> bool:
        """Return True if ``from_state -> to_state`` is allowed under ``name``."""
        targets = self.allowed_to(name, from_state)
        return targets is not None and to_state in targets

    def assert_transition(self, name: str, from_state: int, to_state: int) -> None:
        """Raise IllegalTransitionError if the transition is not allowed."""
        if not self.is_transition_valid(name, from_state, to_state):
            log_rule_event(
                logger, name, "assert", "rejected",
                from_state=from_state, to_state=to_state,
                error_code=ErrorCode.ILLEGAL_TRANSITION,
            )
            raise IllegalTransitionError(
                f"Illegal transition in {name!r}: {from_state} -> {to_state}. "
                f"Allowed from {from_state}: {self.allowed_to(name, from_state) or []}"
            )

    def allowed_to(self, name: str, from_state: int) -> Optional[List[int]]:
        """
        Return the target states reachable from ``from_state`` in one step.

        The returned list is the stored one, not a copy; treat it as
        read-only. Returns None if the name or the state is unknown.
        """
        rule_set = self._rule_sets.get(name)
        if rule_set is None:
            return None
        return rule_set.transitions.get(from_state)

    def transitions(self, name: str) -> Optional[Dict[int, List[int]]]:
        """Return the stored adjacency for ``name`` (read-only), or None."""
        rule_set = self._rule_sets.get(name)
        if rule_set is None:
            return None
        return rule_set.transitions

    def original(self, name: str) -> Optional[str]:
        """Return the rule text first supplied for ``name``, or None."""
        rule_set = self._rule_sets.get(name)
        return rule_set.original if rule_set else None

    def names(self) -> List[str]:
        return list(self._rule_sets)

    def __contains__(self, name: object) -> bool:
        return name in self._rule_sets

    def __len__(self) -> int:
        return len(self._rule_sets)
