from __future__ import annotations

from typing import Optional


class GeneratorError(Exception):
    """Fatal abort of a generation run. No Result is produced."""

    def __init__(self, message: str, iteration: Optional[int] = None):
        super().__init__(message)
        self.iteration = iteration


class GenerationError(GeneratorError):
    """The code generation capability could not produce code."""


class VerificationError(GeneratorError):
    """The verification capability itself crashed (not the candidate code)."""
