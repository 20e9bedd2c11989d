"""Structural move generation (pre-legality) for a :class:`Position`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesstree.core import legality
from chesstree.core.attacks import (
    BISHOP_RAYS,
    KING_TARGETS,
    KNIGHT_TARGETS,
    QUEEN_RAYS,
    ROOK_RAYS,
)
from chesstree.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chesstree.core.move import PROMOTION_TYPES, Move
from chesstree.core.types import Square, make_square

if TYPE_CHECKING:
    from chesstree.core.position import Position

# color -> (rank step, home rank, promotion rank, en passant capture rank)
_PAWN_GEOMETRY: dict[Color, tuple[int, int, int, int]] = {
    Color.WHITE: (1, 1, 7, 4),
    Color.BLACK: (-1, 6, 0, 3),
}

_KINGSIDE: dict[Color, CastlingRights] = {
    Color.WHITE: CastlingRights.WHITE_KINGSIDE,
    Color.BLACK: CastlingRights.BLACK_KINGSIDE,
}
_QUEENSIDE: dict[Color, CastlingRights] = {
    Color.WHITE: CastlingRights.WHITE_QUEENSIDE,
    Color.BLACK: CastlingRights.BLACK_QUEENSIDE,
}


class MoveGenerator:
    """Enumerates structurally possible moves for the side to move.

    Nothing here checks whether the mover's own king ends up attacked;
    that is left to :func:`chesstree.core.legality.filter_invalid`. Castling
    is the one exception: the king's origin and transit squares are checked
    through the legality filter while generating.
    """

    __slots__ = ("_pos", "_squares")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._squares = position.squares

    # -- Public API ---------------------------------------------------------

    def generate_children(self) -> list[Position]:
        """Every candidate successor position, in generation order."""
        pos = self._pos
        return [pos.apply(move) for move in self.generate_moves()]

    def generate_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move

        for sq, piece in enumerate(self._squares):
            if piece.color != color:
                continue
            ptype = piece.piece_type
            if ptype == PieceType.PAWN:
                self._gen_pawn(sq, color, moves)
            elif ptype == PieceType.KNIGHT:
                self._gen_steps(sq, color, KNIGHT_TARGETS[sq], moves)
            elif ptype == PieceType.BISHOP:
                self._gen_sliding(sq, color, BISHOP_RAYS[sq], moves)
            elif ptype == PieceType.ROOK:
                self._gen_sliding(sq, color, ROOK_RAYS[sq], moves)
            elif ptype == PieceType.QUEEN:
                self._gen_sliding(sq, color, QUEEN_RAYS[sq], moves)
            elif ptype == PieceType.KING:
                self._gen_steps(sq, color, KING_TARGETS[sq], moves)
                self._gen_castling(sq, color, moves)

        return moves

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        squares = self._squares
        step, home_rank, promo_rank, ep_rank = _PAWN_GEOMETRY[color]
        file_idx = sq & 7
        rank_idx = sq >> 3
        next_rank = rank_idx + step
        if not (0 <= next_rank < 8):
            return

        one_step = make_square(file_idx, next_rank)
        if squares[one_step].is_empty:
            self._add_pawn_move(sq, one_step, next_rank == promo_rank, moves)
            if rank_idx == home_rank:
                two_step = make_square(file_idx, rank_idx + 2 * step)
                if squares[two_step].is_empty:
                    moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        ep_file = self._pos.en_passant_file
        for cap_file in (file_idx - 1, file_idx + 1):
            if not (0 <= cap_file < 8):
                continue
            cap_sq = make_square(cap_file, next_rank)
            target = squares[cap_sq]
            if not target.is_empty:
                if target.color != color:
                    self._add_pawn_move(sq, cap_sq, next_rank == promo_rank, moves)
            elif cap_file == ep_file and rank_idx == ep_rank:
                victim = squares[make_square(cap_file, rank_idx)]
                if victim.is_pawn and victim.color != color:
                    moves.append(Move(sq, cap_sq, MoveFlag.EN_PASSANT))

    @staticmethod
    def _add_pawn_move(
        sq: Square, to_sq: Square, promotes: bool, moves: list[Move]
    ) -> None:
        if promotes:
            for pt in PROMOTION_TYPES:
                moves.append(Move(sq, to_sq, MoveFlag.PROMOTION, pt))
        else:
            moves.append(Move(sq, to_sq))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        squares = self._squares
        for to_sq in targets:
            if squares[to_sq].color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        squares = self._squares
        for ray in rays:
            for to_sq in ray:
                target = squares[to_sq]
                if target.is_empty:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        rights = self._pos.castling
        offset = 0 if color == Color.WHITE else 56
        if king_sq != offset + 4:
            return

        squares = self._squares
        rook = (color, PieceType.ROOK)

        if rights & _KINGSIDE[color]:
            rook_piece = squares[offset + 7]
            if (
                (rook_piece.color, rook_piece.piece_type) == rook
                and squares[offset + 5].is_empty
                and squares[offset + 6].is_empty
                and legality.castling_path_safe(self._pos, king_sq, offset + 5)
            ):
                moves.append(Move(king_sq, offset + 6, MoveFlag.CASTLE_KINGSIDE))

        if rights & _QUEENSIDE[color]:
            rook_piece = squares[offset]
            if (
                (rook_piece.color, rook_piece.piece_type) == rook
                and squares[offset + 1].is_empty
                and squares[offset + 2].is_empty
                and squares[offset + 3].is_empty
                and legality.castling_path_safe(self._pos, king_sq, offset + 3)
            ):
                moves.append(Move(king_sq, offset + 2, MoveFlag.CASTLE_QUEENSIDE))
