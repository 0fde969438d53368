"""Exception hierarchy for puzzle loading and validation."""


class KenKenError(Exception):
    """Base exception for puzzle handling failures."""


class InvalidPuzzle(KenKenError, ValueError):
    """Raised when a puzzle model breaks its structural invariants."""


class PuzzleFormatError(KenKenError, ValueError):
    """Raised when the textual puzzle description cannot be parsed."""
