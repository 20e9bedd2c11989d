"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from chesstree.core.enums import MoveFlag, PieceType
from chesstree.core.types import Square, square_name

# Kinds a pawn may become on the last rank, in generation order.
PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
)

_PROMO_CHARS: dict[PieceType, str] = dict(zip(PROMOTION_TYPES, "nbrq"))


@dataclass(frozen=True, slots=True)
class Move:
    """How a child position was derived from its parent.

    Every derived :class:`~chesstree.core.position.Position` keeps the move
    that produced it in ``last_move``, so tree consumers can name a child
    without diffing placements.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS[self.promotion]
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)

    @property
    def is_castling(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)
