"""Exception types raised across the ink engine."""

from __future__ import annotations


class InkspaceError(Exception):
    """Base class for every inkspace error."""


class InputError(InkspaceError):
    """An operation needed at least one stroke (or a positive count) and got none.

    The core resolves these with documented defaults; callers only see them in
    logs.
    """


class ExternalServiceError(InkspaceError):
    """The reasoning service returned a reply that could not be used."""

    def __init__(self, message: str, raw: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class GlyphMissingError(InkspaceError):
    """A character has no renderable outline in the active glyph source."""

    def __init__(self, char: str) -> None:
        super().__init__(f"No outline for {char!r}")
        self.char = char
