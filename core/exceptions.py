# core/exceptions.py
from typing import Iterable, Optional


class SteeringError(Exception):
    """Base exception for steering-file errors."""
    pass


class ParseError(SteeringError):
    """Raised when steering-file text cannot be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None, line: Optional[str] = None):
        self.message = message
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        if line is not None:
            message = f"{message} ({line!r})"
        super().__init__(message)


class SteeringTypeError(SteeringError, TypeError):
    """Raised when a key or value cannot be held by a steering parameter set."""

    def __init__(self, message: str, key: Optional[object] = None):
        self.key = key
        super().__init__(message)


class SteeringKeyError(SteeringError, KeyError):
    """Raised when a selection names keys that are not in the set."""

    def __init__(self, keys: Iterable[str]):
        self.keys = list(keys)
        super().__init__(f"Steering parameter(s) not found: {', '.join(repr(k) for k in self.keys)}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the whole message.
        return self.args[0]


class TemplateError(SteeringError):
    """Raised when the built-in steering template cannot be loaded."""
    pass
