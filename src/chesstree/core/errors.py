"""Exceptions raised by the chess core."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for chess core failures."""


class OutOfBounds(ChessError, IndexError):
    """Square coordinates outside 0–7."""


class MalformedInput(ChessError, ValueError):
    """FEN text that cannot be decoded into a playable position."""


class InvalidPosition(ChessError):
    """Position without exactly one king per color.

    Only raised inside the legality filter, where it means "drop this
    candidate".
    """
