"""Error codes and exceptions for transval."""
from enum import Enum, auto
from typing import Optional


class ErrorCode(Enum):
    """Enumeration of all possible error codes in the library."""

    WRONG_INPUT = auto()
    TARGET_EMPTY = auto()
    EMPTY_INPUT = auto()
    ILLEGAL_TRANSITION = auto()


class TransvalError(Exception):
    """Base exception for transval errors."""

    def __init__(self, code: ErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code.name}] {message}")


class RuleParseError(TransvalError):
    """Base for errors raised while parsing a rule-set string."""

    def __init__(self, code: ErrorCode, message: str, rule: Optional[str] = None):
        self.rule = rule
        super().__init__(code, message)


class WrongInputError(RuleParseError):
    """Raised when a rule is structurally malformed or a state is not an integer."""

    def __init__(self, message: str, rule: Optional[str] = None):
        super().__init__(ErrorCode.WRONG_INPUT, message, rule)


class TargetEmptyError(RuleParseError):
    """Raised when a rule declares no target states."""

    def __init__(self, message: str, rule: Optional[str] = None):
        super().__init__(ErrorCode.TARGET_EMPTY, message, rule)


class EmptyInputError(RuleParseError):
    """Raised for an empty rule-set string when empty input is disallowed."""

    def __init__(self, message: str = "input is empty"):
        super().__init__(ErrorCode.EMPTY_INPUT, message)


class IllegalTransitionError(TransvalError):
    """Raised when enforcing a transition that the rule set does not allow."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.ILLEGAL_TRANSITION, message)
