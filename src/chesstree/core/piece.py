"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chesstree.core.enums import Color, PieceType

# FEN character ↔ (Color, PieceType)
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {
    "P": (Color.WHITE, PieceType.PAWN),
    "N": (Color.WHITE, PieceType.KNIGHT),
    "B": (Color.WHITE, PieceType.BISHOP),
    "R": (Color.WHITE, PieceType.ROOK),
    "Q": (Color.WHITE, PieceType.QUEEN),
    "K": (Color.WHITE, PieceType.KING),
    "p": (Color.BLACK, PieceType.PAWN),
    "n": (Color.BLACK, PieceType.KNIGHT),
    "b": (Color.BLACK, PieceType.BISHOP),
    "r": (Color.BLACK, PieceType.ROOK),
    "q": (Color.BLACK, PieceType.QUEEN),
    "k": (Color.BLACK, PieceType.KING),
}

_FEN_CHARS: dict[tuple[Color, PieceType], str] = {v: k for k, v in _CHAR_MAP.items()}
_FEN_CHARS[(Color.NONE, PieceType.EMPTY)] = "."


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable value object for the contents of one square.

    An empty square is ``Piece(Color.NONE, PieceType.EMPTY)``; a color of
    ``NONE`` is only valid together with ``EMPTY`` and vice versa.
    """

    color: Color = Color.NONE
    piece_type: PieceType = PieceType.EMPTY

    def __post_init__(self) -> None:
        if (self.color == Color.NONE) != (self.piece_type == PieceType.EMPTY):
            raise ValueError(
                f"Inconsistent piece: {self.color.name} {self.piece_type.name}"
            )

    # ── Classification ───────────────────────────────────────────────────

    @property
    def is_empty(self) -> bool:
        return self.piece_type == PieceType.EMPTY

    @property
    def is_white(self) -> bool:
        return self.color == Color.WHITE

    @property
    def is_black(self) -> bool:
        return self.color == Color.BLACK

    @property
    def is_pawn(self) -> bool:
        return self.piece_type == PieceType.PAWN

    @property
    def is_knight(self) -> bool:
        return self.piece_type == PieceType.KNIGHT

    @property
    def is_bishop(self) -> bool:
        return self.piece_type == PieceType.BISHOP

    @property
    def is_rook(self) -> bool:
        return self.piece_type == PieceType.ROOK

    @property
    def is_queen(self) -> bool:
        return self.piece_type == PieceType.QUEEN

    @property
    def is_king(self) -> bool:
        return self.piece_type == PieceType.KING

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black, '.' = empty)."""
        return _FEN_CHARS[(self.color, self.piece_type)]

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN character, e.g. 'N' → white knight."""
        try:
            color, ptype = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(color, ptype)


EMPTY = Piece()
