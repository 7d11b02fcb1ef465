"""Errors raised while turning uploaded plan text into a canonical Plan."""


class PlanInputError(ValueError):
    """Base class for rejected plan input. ``reason`` is safe to show to the user."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ParseError(PlanInputError):
    """The input could not be decoded into a generic mapping at all."""


class ValidationError(PlanInputError):
    """The decoded document fails the minimal shape check."""


__all__ = ["PlanInputError", "ParseError", "ValidationError"]
