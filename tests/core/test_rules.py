"""Tests for Rules: check, checkmate, stalemate, fifty-move rule."""

from chesstree.core.enums import Color, GameResult, PieceType
from chesstree.core.notation import STARTING_FEN, position_from_fen
from chesstree.core.piece import EMPTY, Piece
from chesstree.core.position import Position
from chesstree.core.rules import Rules
from chesstree.core.types import E1


class TestCheck:
    def test_starting_not_in_check(self) -> None:
        assert not Rules.is_in_check(position_from_fen(STARTING_FEN))

    def test_fools_mate_in_check(self) -> None:
        # After 1.f3 e5 2.g4 Qh4# — white is in check
        pos = position_from_fen(
            "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        )
        assert Rules.is_in_check(pos)


class TestCheckmate:
    def test_fools_mate(self) -> None:
        pos = position_from_fen(
            "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        )
        assert Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.BLACK_WINS

    def test_back_rank_mate(self) -> None:
        # R on a8 checks black king d8; white king d6 covers all escapes
        pos = position_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1")
        assert Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.WHITE_WINS

    def test_not_checkmate_when_can_escape(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/r3K3 w - - 0 1")
        assert not Rules.is_checkmate(pos)


class TestStalemate:
    def test_king_trapped(self) -> None:
        # Black king on h8, white K on f6, white Q on g6
        pos = position_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert Rules.is_stalemate(pos)
        assert Rules.game_result(pos) == GameResult.DRAW

    def test_starting_position_in_progress(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert not Rules.is_stalemate(pos)
        assert Rules.game_result(pos) == GameResult.IN_PROGRESS


class TestFiftyMoveRule:
    def test_threshold(self) -> None:
        assert not Rules.is_fifty_move_rule(
            position_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 99 80")
        )
        assert Rules.is_fifty_move_rule(
            position_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 100 80")
        )


class TestKinglessPosition:
    def test_result_is_defined_without_kings(self) -> None:
        squares = [EMPTY] * 64
        squares[E1] = Piece(Color.WHITE, PieceType.ROOK)
        pos = Position(squares)
        assert not Rules.is_in_check(pos)
        assert not Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.DRAW
