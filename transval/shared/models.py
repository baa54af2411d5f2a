"""Data models for transval."""
from dataclasses import dataclass, field
from itertools import permutations
from typing import Dict, List

RULE_SPLITTER = ";"
TRANSITION_SPLITTER = "=>"
TARGET_SPLITTER = ","


@dataclass(frozen=True)
class RuleSyntax:
    """Delimiters and empty-input policy used when parsing rule sets."""

    rule_splitter: str = RULE_SPLITTER              # Separates rules
    transition_splitter: str = TRANSITION_SPLITTER  # Separates the source state from its targets
    target_splitter: str = TARGET_SPLITTER          # Separates target states
    allow_empty: bool = True                        # Treat "" as "no rules" instead of an error

    def __post_init__(self):
        """Validate configuration."""
        splitters = (self.rule_splitter, self.transition_splitter, self.target_splitter)
        for splitter in splitters:
            if not splitter:
                raise ValueError("Delimiters must not be empty")
            if any(ch.isspace() for ch in splitter):
                raise ValueError(f"Delimiter must not contain whitespace: {splitter!r}")
        for inner, outer in permutations(splitters, 2):
            if inner in outer:
                raise ValueError(
                    f"Delimiters must be distinct and not contain each other: {splitters}"
                )


@dataclass
class RuleSet:
    """A named rule set: the source text first supplied plus its merged adjacency."""

    original: str
    transitions: Dict[int, List[int]] = field(default_factory=dict)

    def merge(self, transitions: Dict[int, List[int]]) -> None:
        """Append targets per source state, keeping order and duplicates."""
        for from_state, targets in transitions.items():
            self.transitions.setdefault(from_state, []).extend(targets)

    @property
    def rule_count(self) -> int:
        """Number of distinct source states."""
        return len(self.transitions)

    def __str__(self) -> str:
        return f"RuleSet({self.rule_count} states, original={self.original!r})"
