"""Legality filter: drop candidates that leave the mover's king attacked."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from chesstree.core.attacks import is_square_attacked
from chesstree.core.enums import Color, PieceType
from chesstree.core.errors import InvalidPosition
from chesstree.core.types import Square

if TYPE_CHECKING:
    from chesstree.core.position import Position


def king_squares(position: Position) -> tuple[Square, Square]:
    """Return ``(white_king_sq, black_king_sq)``.

    Raises :class:`InvalidPosition` unless each color has exactly one king.
    """
    found: list[list[Square]] = [[], []]
    for sq, piece in enumerate(position.squares):
        if piece.piece_type == PieceType.KING:
            found[int(piece.color)].append(sq)

    for color in (Color.WHITE, Color.BLACK):
        count = len(found[int(color)])
        if count != 1:
            raise InvalidPosition(f"Expected one {color} king, found {count}")
    return found[0][0], found[1][0]


def is_in_check(position: Position, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?

    A position without exactly one king per color has no king to attack,
    so it is never in check.
    """
    try:
        king_sq = king_squares(position)[int(color)]
    except InvalidPosition:
        return False
    return is_square_attacked(position.squares, king_sq, color.opposite)


def is_valid(position: Position) -> bool:
    """Whether the side that just moved left its own king safe."""
    mover = position.side_to_move.opposite
    try:
        king_sq = king_squares(position)[int(mover)]
    except InvalidPosition:
        return False
    return not is_square_attacked(position.squares, king_sq, position.side_to_move)


def filter_invalid(candidates: Iterable[Position]) -> list[Position]:
    """Keep the candidates that pass :func:`is_valid`, preserving order."""
    return [candidate for candidate in candidates if is_valid(candidate)]


def castling_path_safe(position: Position, king_sq: Square, transit_sq: Square) -> bool:
    """The king is not in check and will not pass through an attacked square.

    *position* is the one before castling; the landing square is covered
    afterwards by :func:`is_valid` on the derived child.
    """
    opponent = position.side_to_move.opposite
    squares = position.squares
    return not (
        is_square_attacked(squares, king_sq, opponent)
        or is_square_attacked(squares, transit_sq, opponent)
    )
