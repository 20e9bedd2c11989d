"""FEN parsing and serialization."""

from __future__ import annotations

from chesstree.core.enums import CastlingRights, Color, PieceType
from chesstree.core.errors import MalformedInput
from chesstree.core.piece import EMPTY, Piece
from chesstree.core.position import Position
from chesstree.core.types import file_of, make_square, parse_square, rank_of

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    Placement, side to move and castling are required; en passant and the
    two clocks are optional and default to ``-``, ``0`` and ``1``.
    """
    parts = fen.split()
    if not (3 <= len(parts) <= 6):
        raise MalformedInput(f"Invalid FEN (need 3-6 fields): {fen!r}")

    placement, side_part, castling_part = parts[:3]

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise MalformedInput(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    squares = [EMPTY] * 64
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch in "12345678":
                file += int(ch)
            else:
                if file >= 8:
                    raise MalformedInput(f"Invalid FEN rank width: {fen!r}")
                try:
                    squares[make_square(file, rank)] = Piece.from_char(ch)
                except ValueError:
                    raise MalformedInput(
                        f"Invalid FEN placement character {ch!r}: {fen!r}"
                    ) from None
                file += 1
            if file > 8:
                raise MalformedInput(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise MalformedInput(f"Invalid FEN rank width: {fen!r}")

    for color in (Color.WHITE, Color.BLACK):
        king = Piece(color, PieceType.KING)
        count = squares.count(king)
        if count != 1:
            raise MalformedInput(
                f"Invalid FEN: expected one {color} king, found {count}: {fen!r}"
            )

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise MalformedInput(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        seen: set[str] = set()
        for ch in castling_part:
            right = _CASTLING_CHARS.get(ch)
            if right is None or ch in seen:
                raise MalformedInput(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right

    # 4. En passant
    ep_file: int | None = None
    ep_part = parts[3] if len(parts) > 3 else "-"
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except ValueError:
            raise MalformedInput(f"Invalid FEN en-passant square: {ep_part!r}") from None
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise MalformedInput(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )
        ep_file = file_of(ep)

    # 5–6. Clocks (optional)
    halfmove = _parse_clock(parts, 4, default=0, minimum=0, name="halfmove clock")
    fullmove = _parse_clock(parts, 5, default=1, minimum=1, name="fullmove number")

    return Position(squares, side, castling, ep_file, halfmove, fullmove)


def _parse_clock(
    parts: list[str], index: int, *, default: int, minimum: int, name: str
) -> int:
    if len(parts) <= index:
        return default
    try:
        value = int(parts[index])
    except ValueError:
        raise MalformedInput(f"Invalid FEN {name}: {parts[index]!r}") from None
    if value < minimum:
        raise MalformedInput(f"Invalid FEN {name}: {parts[index]!r}")
    return value


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos.squares[make_square(file, rank)]
            if piece.is_empty:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(
        ch for ch, right in _CASTLING_CHARS.items() if pos.castling & right
    )
    if not castling_str:
        castling_str = "-"

    # 4. En passant (target square sits behind the pawn that just advanced)
    ep_str = "-"
    if pos.en_passant_file is not None:
        ep_rank = "6" if pos.side_to_move == Color.WHITE else "3"
        ep_str = "abcdefgh"[pos.en_passant_file] + ep_rank

    return f"{board_str} {side_str} {castling_str} {ep_str} {pos.halfmove_clock} {pos.fullmove_number}"
