"""
_exceptions.py
==============
Error taxonomy for tidytree.

Every error carries a short ``message`` and, where one exists, a
``suggestion`` describing how to fix the input.  All concrete errors also
derive from ``ValueError`` so callers that only know the standard library
can still catch them.

  TreeError
  ├── StructuralError    invalid mutation / disjoint or missing branches
  ├── NewickParseError   malformed Newick text
  └── MatrixError        malformed distance matrix for neighbor joining
                         (also exported as PreconditionError)
"""

from typing import Optional


class TreeError(Exception):
    """Base exception for tidytree errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class StructuralError(TreeError, ValueError):
    """Raised when a tree operation cannot be applied to the given branches."""


class NewickParseError(TreeError, ValueError):
    """Raised when Newick text cannot be parsed into a tree."""

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        suggestion: Optional[str] = None,
    ):
        self.position = position
        if position is not None:
            message = f"{message} (token {position})"
        super().__init__(message, suggestion)


class MatrixError(TreeError, ValueError):
    """Raised when a distance matrix violates neighbor-joining preconditions."""


PreconditionError = MatrixError
