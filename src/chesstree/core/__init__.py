"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from chesstree.core import Position, STARTING_FEN

    pos = Position.from_fen(STARTING_FEN)
    for child in pos.legal_children():
        print(child.last_move, child.evaluate_material())
"""

from chesstree.core.enums import CastlingRights, Color, GameResult, MoveFlag, PieceType
from chesstree.core.errors import ChessError, InvalidPosition, MalformedInput, OutOfBounds
from chesstree.core.legality import filter_invalid, is_in_check, is_valid
from chesstree.core.move import Move
from chesstree.core.move_generator import MoveGenerator
from chesstree.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chesstree.core.piece import EMPTY, Piece
from chesstree.core.position import PIECE_VALUES, Position
from chesstree.core.rules import Rules
from chesstree.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameResult",
    "MoveFlag",
    "PieceType",
    # Errors
    "ChessError",
    "InvalidPosition",
    "MalformedInput",
    "OutOfBounds",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "EMPTY",
    "Move",
    "MoveGenerator",
    "PIECE_VALUES",
    "Piece",
    "Position",
    "Rules",
    # Legality
    "filter_invalid",
    "is_in_check",
    "is_valid",
    # Notation
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
]
