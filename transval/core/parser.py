"""Rule parser – turns rule-set strings like ``"1=>2,3;2=>3"`` into adjacency maps.

Grammar::

    ruleset   := rule (";" rule)*
    rule      := from "=>" to-list
    to-list   := to ("," to)*
    from, to  := signed integer

Whitespace around every delimiter is ignored. Empty rules (``";;"``) and empty
targets (``"1=>2,,3"``) are skipped, but a rule whose target side holds no
states at all is rejected.
"""
import re
from typing import Dict, List, Optional

from transval.shared.errors import EmptyInputError, TargetEmptyError, WrongInputError
from transval.shared.models import RuleSyntax

DEFAULT_SYNTAX = RuleSyntax()

# int() also accepts underscores and non-ASCII digits; states may not
_INT_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)

# States are signed 64-bit integers
STATE_MIN = -2**63
STATE_MAX = 2**63 - 1
_MAX_STATE_DIGITS = len(str(STATE_MAX))


def _parse_state(token: str, rule: str) -> int:
    if not _INT_RE.fullmatch(token):
        raise WrongInputError(f"State {token!r} is not an integer", rule)
    sign = "-" if token.startswith("-") else ""
    digits = token.lstrip("+-").lstrip("0") or "0"
    # Length check first so int() never sees an oversized literal
    if len(digits) > _MAX_STATE_DIGITS:
        raise WrongInputError(f"State {token[:24]!r}... is out of range", rule)
    value = int(sign + digits)
    if not STATE_MIN <= value <= STATE_MAX:
        raise WrongInputError(f"State {token!r} is out of range", rule)
    return value


def parse_int_list(text: str, syntax: Optional[RuleSyntax] = None) -> List[int]:
    """
    Parse a comma-separated list of states.

    Empty tokens are skipped, so ``"1, ,2"`` gives ``[1, 2]`` and a blank
    string gives ``[]``.

    Raises:
        WrongInputError: If a non-empty token is not an integer
    """
    syntax = syntax or DEFAULT_SYNTAX
    states = []
    for token in text.split(syntax.target_splitter):
        token = token.strip()
        if not token:
            continue
        states.append(_parse_state(token, text))
    return states


def parse(rules: str, syntax: Optional[RuleSyntax] = None) -> Dict[int, List[int]]:
    """
    Parse a rule-set string into ``{from_state: [to_state, ...]}``.

    Targets of a source state that appears more than once are concatenated in
    the order they are encountered. Parsing is all-or-nothing: the first bad
    rule raises and nothing is returned.

    Args:
        rules: Rule-set string, e.g. ``"1=>2,3;2=>3"``
        syntax: Delimiters and empty-input policy (defaults to ``; => ,``)

    Returns:
        Adjacency map, in first-seen key order

    Raises:
        EmptyInputError: If the input holds no rules and ``allow_empty`` is off
        WrongInputError: If a rule is malformed or a state is not an integer
        TargetEmptyError: If a rule has no target states
    """
    syntax = syntax or DEFAULT_SYNTAX

    if not rules:
        if not syntax.allow_empty:
            raise EmptyInputError()
        return {}

    result: Dict[int, List[int]] = {}

    for rule in rules.split(syntax.rule_splitter):
        rule = rule.strip()
        if not rule:
            continue

        sides = rule.split(syntax.transition_splitter)
        if len(sides) != 2:
            raise WrongInputError(
                f"Rule must contain exactly one {syntax.transition_splitter!r}", rule
            )

        from_state = _parse_state(sides[0].strip(), rule)

        right = sides[1].strip()
        if not right:
            raise TargetEmptyError(f"No target states for {from_state}", rule)

        targets = parse_int_list(right, syntax)
        if not targets:
            raise TargetEmptyError(f"No target states for {from_state}", rule)

        result.setdefault(from_state, []).extend(targets)

    if not result and not syntax.allow_empty:
        raise EmptyInputError(f"No rules in {rules!r}")

    return result


def format_rules(transitions: Dict[int, List[int]], syntax: Optional[RuleSyntax] = None) -> str:
    """Serialize an adjacency map back into rule-set text, keeping order."""
    syntax = syntax or DEFAULT_SYNTAX
    return syntax.rule_splitter.join(
        f"{from_state}{syntax.transition_splitter}"
        + syntax.target_splitter.join(str(to) for to in targets)
        for from_state, targets in transitions.items()
    )
