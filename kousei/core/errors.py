"""
Error types raised by the kousei core.

Most of these never reach the caller of a lint pass: the normalizer and the
rule engine convert them into findings. Only InvalidDocument and ConfigError
are meant to be seen from outside.
"""


class KouseiError(Exception):
    """Base class for all kousei errors."""


class OutOfRange(KouseiError, IndexError):
    """An absolute offset falls outside [0, len(document)]."""

    def __init__(self, offset: int, length: int):
        super().__init__(f"Offset {offset} is outside the document (length {length})")
        self.offset = offset
        self.length = length


class InvalidPosition(KouseiError, ValueError):
    """A line/column pair does not address a character in the document."""

    def __init__(self, line: int, column: int, reason: str = ""):
        message = f"Invalid position (line {line}, column {column})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.line = line
        self.column = column


class InvalidFixRange(KouseiError, ValueError):
    """A fix range violates 0 <= start <= end <= len(document)."""

    def __init__(self, start: int, end: int, length: int):
        super().__init__(f"Fix range [{start}, {end}) is invalid for a document of length {length}")
        self.start = start
        self.end = end
        self.length = length


class RuleFailure(KouseiError):
    """A rule raised while scanning a document."""

    def __init__(self, rule_id: str, description: str):
        super().__init__(f"Rule '{rule_id}' failed: {description}")
        self.rule_id = rule_id
        self.description = description


class InvalidDocument(KouseiError, TypeError):
    """The document handed to the runner is not text."""


class ConfigError(KouseiError, ValueError):
    """The linter configuration is malformed."""
