"""Precomputed piece geometry and square-attack detection.

Shared by the move generator (where pieces may go) and the legality
filter (whether a king stands on an attacked square), so both follow the
same offsets and rays.
"""

from __future__ import annotations

from collections.abc import Sequence

from chesstree.core.enums import Color, PieceType
from chesstree.core.piece import Piece
from chesstree.core.types import Square, make_square

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_DIAGONAL_SLIDERS = (PieceType.BISHOP, PieceType.QUEEN)
_ORTHOGONAL_SLIDERS = (PieceType.ROOK, PieceType.QUEEN)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _build_pawn_attackers(rank_step: int) -> tuple[tuple[Square, ...], ...]:
    """Squares from which a pawn moving by *rank_step* attacks each square."""
    attackers: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        from_rank = (sq >> 3) - rank_step
        squares: list[Square] = []
        if 0 <= from_rank < 8:
            for af in (file_idx - 1, file_idx + 1):
                if 0 <= af < 8:
                    squares.append(make_square(af, from_rank))
        attackers.append(tuple(squares))
    return tuple(attackers)


KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
KING_TARGETS = _build_targets(KING_OFFSETS)

BISHOP_RAYS = _build_rays(BISHOP_DIRS)
ROOK_RAYS = _build_rays(ROOK_DIRS)
QUEEN_RAYS = _build_rays(QUEEN_DIRS)

# [color] -> [target square] -> squares a pawn of that color attacks it from.
_PAWN_ATTACKERS = (_build_pawn_attackers(1), _build_pawn_attackers(-1))


def is_square_attacked(
    squares: Sequence[Piece], sq: Square, by_color: Color
) -> bool:
    """Is *sq* attacked by any piece of *by_color* on *squares*?"""
    for from_sq in _PAWN_ATTACKERS[int(by_color)][sq]:
        piece = squares[from_sq]
        if piece.color == by_color and piece.piece_type == PieceType.PAWN:
            return True

    for from_sq in KNIGHT_TARGETS[sq]:
        piece = squares[from_sq]
        if piece.color == by_color and piece.piece_type == PieceType.KNIGHT:
            return True

    for from_sq in KING_TARGETS[sq]:
        piece = squares[from_sq]
        if piece.color == by_color and piece.piece_type == PieceType.KING:
            return True

    if _ray_hits(squares, BISHOP_RAYS[sq], by_color, _DIAGONAL_SLIDERS):
        return True
    return _ray_hits(squares, ROOK_RAYS[sq], by_color, _ORTHOGONAL_SLIDERS)


def _ray_hits(
    squares: Sequence[Piece],
    rays: tuple[tuple[Square, ...], ...],
    by_color: Color,
    sliders: tuple[PieceType, ...],
) -> bool:
    for ray in rays:
        for to_sq in ray:
            piece = squares[to_sq]
            if piece.piece_type == PieceType.EMPTY:
                continue
            if piece.color == by_color and piece.piece_type in sliders:
                return True
            break
    return False
