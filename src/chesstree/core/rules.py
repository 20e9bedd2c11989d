"""High-level chess rules: check, checkmate, stalemate, fifty-move rule."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesstree.core import legality
from chesstree.core.enums import Color, GameResult

if TYPE_CHECKING:
    from chesstree.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return legality.is_in_check(position, position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        return not position.legal_children()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        return not position.legal_children()

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def game_result(
        position: Position, legal_children: list[Position] | None = None
    ) -> GameResult:
        """Determine the result, reusing *legal_children* when already known."""
        children = (
            legal_children if legal_children is not None else position.legal_children()
        )

        if not children:
            if Rules.is_in_check(position):
                return (
                    GameResult.BLACK_WINS
                    if position.side_to_move == Color.WHITE
                    else GameResult.WHITE_WINS
                )
            return GameResult.DRAW  # stalemate

        return GameResult.IN_PROGRESS
