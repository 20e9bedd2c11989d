"""Position — immutable game state (placement + metadata) and move derivation."""

from __future__ import annotations

from collections.abc import Sequence

from chesstree.core import legality
from chesstree.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chesstree.core.errors import OutOfBounds
from chesstree.core.move import PROMOTION_TYPES, Move
from chesstree.core.move_generator import MoveGenerator
from chesstree.core.piece import EMPTY, Piece
from chesstree.core.types import (
    Square,
    checked_square,
    file_of,
    is_valid_square,
    make_square,
    rank_of,
)

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.EMPTY: 0,
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20_000,
}

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Rook home squares and the right lost once anything leaves or lands there.
_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}


def _require_square(sq: Square) -> None:
    if not is_valid_square(sq):
        raise OutOfBounds(f"Square index out of bounds: {sq}")


class Position:
    """Full chess position: 64 squares + side to move + castling + en passant + clocks.

    Instances are never mutated once built. Successors are produced with
    :meth:`derive` / :meth:`derive_promotion`, which copy the parent's
    placement and apply exactly one move to the copy.
    """

    __slots__ = (
        "_squares",
        "side_to_move",
        "castling",
        "en_passant_file",
        "halfmove_clock",
        "fullmove_number",
        "last_move",
    )

    def __init__(
        self,
        squares: Sequence[Piece] | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant_file: int | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        placement = tuple(squares) if squares is not None else _initial_squares()
        if len(placement) != 64:
            raise ValueError(f"Position needs 64 squares, got {len(placement)}")
        if side_to_move == Color.NONE:
            raise ValueError("Side to move must be white or black")
        if en_passant_file is not None and not (0 <= en_passant_file < 8):
            raise OutOfBounds(f"En passant file out of bounds: {en_passant_file}")
        if halfmove_clock < 0:
            raise ValueError(f"Halfmove clock must be >= 0, got {halfmove_clock}")

        self._squares: tuple[Piece, ...] = placement
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant_file = en_passant_file
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self.last_move: Move | None = None

    # ── Factories ────────────────────────────────────────────────────────

    @classmethod
    def initial(cls) -> Position:
        """Standard starting position."""
        return cls()

    @classmethod
    def from_fen(cls, text: str) -> Position:
        """Decode a FEN string, see :func:`chesstree.core.notation.position_from_fen`."""
        from chesstree.core.notation.fen import position_from_fen

        return position_from_fen(text)

    def to_fen(self) -> str:
        from chesstree.core.notation.fen import position_to_fen

        return position_to_fen(self)

    # ── Read-only access ─────────────────────────────────────────────────

    @property
    def squares(self) -> tuple[Piece, ...]:
        """All 64 squares, indexed by ``rank * 8 + file``."""
        return self._squares

    def piece_at(self, rank: int, file: int) -> Piece:
        return self._squares[checked_square(rank, file)]

    def __getitem__(self, sq: Square) -> Piece:
        _require_square(sq)
        return self._squares[sq]

    def king_square(self, color: Color) -> Square | None:
        """First square holding *color*'s king, or ``None``."""
        king = Piece(color, PieceType.KING)
        for sq, piece in enumerate(self._squares):
            if piece == king:
                return sq
        return None

    # ── Derivation ───────────────────────────────────────────────────────

    @classmethod
    def derive(cls, parent: Position, start: Square, end: Square) -> Position:
        """Return *parent* after the piece on *start* moves to *end*."""
        return cls._derive(parent, start, end, None)

    @classmethod
    def derive_promotion(
        cls,
        parent: Position,
        start: Square,
        end: Square,
        promoted_kind: PieceType,
    ) -> Position:
        """Like :meth:`derive`, with the arriving pawn replaced by *promoted_kind*."""
        if promoted_kind not in PROMOTION_TYPES:
            raise ValueError(f"Cannot promote to {promoted_kind.name}")
        return cls._derive(parent, start, end, promoted_kind)

    def apply(self, move: Move) -> Position:
        """Derive the child reached by *move*."""
        if move.promotion is not None:
            return Position.derive_promotion(self, move.from_sq, move.to_sq, move.promotion)
        return Position.derive(self, move.from_sq, move.to_sq)

    @classmethod
    def _derive(
        cls,
        parent: Position,
        start: Square,
        end: Square,
        promotion: PieceType | None,
    ) -> Position:
        _require_square(start)
        _require_square(end)

        squares = list(parent._squares)
        piece = squares[start]
        if piece.is_empty:
            raise ValueError(f"No piece on square {start}")
        target = squares[end]

        start_rank, start_file = rank_of(start), file_of(start)
        end_rank, end_file = rank_of(end), file_of(end)
        castling = parent.castling
        flag = MoveFlag.NORMAL

        # Fifty-move counter
        if not target.is_empty or piece.is_pawn:
            halfmove_clock = 0
        else:
            halfmove_clock = parent.halfmove_clock + 1

        # En passant target for the opponent
        en_passant_file: int | None = None
        if piece.is_pawn and abs(end_rank - start_rank) == 2:
            en_passant_file = start_file
            flag = MoveFlag.DOUBLE_PAWN

        # En passant capture: the captured pawn sits beside the origin square
        if (
            piece.is_pawn
            and target.is_empty
            and abs(end_rank - start_rank) == 1
            and end_file != start_file
        ):
            captured_sq = make_square(end_file, start_rank)
            captured = squares[captured_sq]
            if captured.is_pawn and captured.color != piece.color:
                squares[captured_sq] = EMPTY
                flag = MoveFlag.EN_PASSANT

        # King moves forfeit both rights; a two-file step also slides the rook
        if piece.is_king:
            if piece.color == Color.WHITE:
                castling &= ~CastlingRights.WHITE_BOTH
            else:
                castling &= ~CastlingRights.BLACK_BOTH
            if abs(end_file - start_file) == 2:
                if end_file > start_file:
                    rook_from = make_square(7, start_rank)
                    rook_to = make_square(5, start_rank)
                    flag = MoveFlag.CASTLE_KINGSIDE
                else:
                    rook_from = make_square(0, start_rank)
                    rook_to = make_square(3, start_rank)
                    flag = MoveFlag.CASTLE_QUEENSIDE
                squares[rook_to] = squares[rook_from]
                squares[rook_from] = EMPTY

        for sq in (start, end):
            if sq in _ROOK_CORNERS:
                castling &= ~_ROOK_CORNERS[sq]

        squares[end] = piece
        squares[start] = EMPTY

        if promotion is not None:
            squares[end] = Piece(piece.color, promotion)
            flag = MoveFlag.PROMOTION

        child = cls.__new__(cls)
        child._squares = tuple(squares)
        child.side_to_move = parent.side_to_move.opposite
        child.castling = castling
        child.en_passant_file = en_passant_file
        child.halfmove_clock = halfmove_clock
        child.fullmove_number = parent.fullmove_number + (
            1 if parent.side_to_move == Color.BLACK else 0
        )
        child.last_move = Move(start, end, flag, promotion)
        return child

    # ── Consumer interface ───────────────────────────────────────────────

    def evaluate_material(self) -> int:
        """Material balance in centipawns, positive when white is ahead."""
        total = 0
        for piece in self._squares:
            if piece.color == Color.WHITE:
                total += PIECE_VALUES[piece.piece_type]
            elif piece.color == Color.BLACK:
                total -= PIECE_VALUES[piece.piece_type]
        return total

    def generate_children(self) -> list[Position]:
        """Every structurally generated successor (may leave own king in check)."""
        return MoveGenerator(self).generate_children()

    def legal_children(self) -> list[Position]:
        """Successors reachable by one legal move."""
        return legality.filter_invalid(self.generate_children())

    def is_valid(self) -> bool:
        """Whether the side that just moved did not leave its king attacked."""
        return legality.is_valid(self)

    # ── Dunder helpers ───────────────────────────────────────────────────

    def _key(self) -> tuple[object, ...]:
        return (
            self._squares,
            self.side_to_move,
            self.castling,
            self.en_passant_file,
            self.halfmove_clock,
            self.fullmove_number,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = [str(self._squares[make_square(file, rank)]) for file in range(8)]
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        rows.append(f"{self.side_to_move} to move, castling={int(self.castling)}")
        return "\n".join(rows)


def _initial_squares() -> tuple[Piece, ...]:
    squares = [EMPTY] * 64
    for f in range(8):
        squares[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
        squares[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
    for f, pt in enumerate(_BACK_RANK):
        squares[make_square(f, 0)] = Piece(Color.WHITE, pt)
        squares[make_square(f, 7)] = Piece(Color.BLACK, pt)
    return tuple(squares)
