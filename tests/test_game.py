"""Tests for the game state machine."""
import logging
import random

import pytest

from sweeper.engine import new_snapshot
from sweeper.errors import ConfigurationError, InvalidIndexError
from sweeper.game import Game, reduce
from sweeper.types import (
    BoardConfig,
    CellStatus,
    GamePhase,
    MarkRemainingMines,
    Reset,
    Reveal,
    RevealAdjacent,
)
from conftest import FixedMines


def test_new_game_is_idle(small_board):
    game = Game(small_board)
    assert game.phase == GamePhase.IDLE
    assert not game.snapshot.mines_placed
    assert all(cell.status == CellStatus.HIDDEN for cell in game.snapshot.cells)


@pytest.mark.parametrize("mine_count", [1, 4, 8])
@pytest.mark.parametrize("seed", range(15))
def test_first_reveal_is_always_safe(mine_count, seed):
    game = Game(BoardConfig(rows=3, columns=3, mine_count=mine_count), rng=random.Random(seed))
    index = seed % 9
    result = game.reveal(index)
    assert result.ok
    assert index not in result.snapshot.mines
    assert len(result.snapshot.mines) == mine_count
    assert result.snapshot.cells[index].status == CellStatus.REVEALED
    assert result.snapshot.phase != GamePhase.LOST


def test_mines_do_not_move_after_placement():
    game = Game(BoardConfig(rows=9, columns=9, mine_count=10), rng=random.Random(3))
    mines = game.reveal(40).snapshot.mines
    for index in (0, 8, 72, 80):
        game.toggle_flag(index)
        game.reveal_adjacent(index)
    assert game.snapshot.mines == mines


def test_cascade_to_win_flags_the_mine(small_board):
    game = Game(small_board, rng=FixedMines(8))
    snapshot = game.reveal(0).snapshot
    assert snapshot.phase == GamePhase.WON
    assert snapshot.mines == frozenset({8})
    assert snapshot.cells[8].status == CellStatus.FLAGGED
    assert all(cell.status == CellStatus.REVEALED for cell in snapshot.cells[:8])


def test_all_but_one_mine_wins_on_first_reveal():
    game = Game(BoardConfig(rows=3, columns=3, mine_count=8), rng=random.Random(0))
    snapshot = game.reveal(4).snapshot
    assert snapshot.phase == GamePhase.WON
    assert snapshot.cells[4].adjacent_mine_count == 8
    assert [cell.status for cell in snapshot.cells].count(CellStatus.FLAGGED) == 8


def test_won_round_ignores_moves(small_board):
    game = Game(small_board, rng=FixedMines(8))
    won = game.reveal(0).snapshot
    assert game.reveal(8).snapshot is won
    assert game.toggle_flag(8).snapshot is won
    assert game.dispatch(MarkRemainingMines(small_board)).snapshot is won


class TestLosing:

    def setup_method(self):
        self.board = BoardConfig(rows=1, columns=5, mine_count=2)
        self.game = Game(self.board, rng=FixedMines(2, 4))
        self.game.reveal(0)

    def test_cascade_before_the_loss(self):
        assert self.game.phase == GamePhase.ACTIVE
        statuses = [cell.status for cell in self.game.snapshot.cells]
        assert statuses[:2] == [CellStatus.REVEALED, CellStatus.REVEALED]

    def test_mine_explodes(self):
        snapshot = self.game.reveal(2).snapshot
        assert snapshot.phase == GamePhase.LOST
        assert snapshot.cells[2].status == CellStatus.EXPLODED
        assert snapshot.cells[4].status == CellStatus.REVEALED
        assert snapshot.cells[3].status == CellStatus.HIDDEN

    def test_lost_round_only_accepts_reset(self):
        lost = self.game.reveal(2).snapshot
        assert self.game.toggle_flag(3).snapshot is lost
        assert self.game.reveal(3).snapshot is lost
        assert self.game.reveal_adjacent(1).snapshot is lost

        snapshot = self.game.reset().snapshot
        assert snapshot.phase == GamePhase.IDLE
        assert not snapshot.mines_placed
        assert all(cell.status == CellStatus.HIDDEN for cell in snapshot.cells)


def test_flag_cycle_from_idle(small_board):
    game = Game(small_board)
    seen = [game.toggle_flag(2).snapshot.cells[2].status for _ in range(3)]
    assert seen == [CellStatus.FLAGGED, CellStatus.QUESTION, CellStatus.HIDDEN]
    assert game.phase == GamePhase.ACTIVE
    assert not game.snapshot.mines_placed


def test_flag_before_first_reveal():
    game = Game(BoardConfig(rows=1, columns=5, mine_count=1), rng=FixedMines(0))
    game.toggle_flag(0)
    snapshot = game.reveal(1).snapshot
    assert snapshot.mines_placed
    assert snapshot.mines == frozenset({0})
    assert snapshot.cells[0].status == CellStatus.FLAGGED
    assert snapshot.cells[1].status == CellStatus.REVEALED
    assert snapshot.cells[1].adjacent_mine_count == 1
    assert snapshot.phase == GamePhase.ACTIVE


def test_reveal_twice_returns_same_snapshot():
    game = Game(BoardConfig(rows=1, columns=5, mine_count=1), rng=FixedMines(2))
    first = game.reveal(0).snapshot
    assert game.reveal(0).snapshot is first


def test_chord_from_game():
    # 0:mine 1:(1) 2:(0) 3:(1) 4:mine
    game = Game(BoardConfig(rows=1, columns=5, mine_count=2), rng=FixedMines(0, 4))
    game.reveal(1)
    assert game.reveal_adjacent(1).snapshot.cells[2].status == CellStatus.HIDDEN
    game.toggle_flag(0)
    snapshot = game.reveal_adjacent(1).snapshot
    assert snapshot.cells[2].status == CellStatus.REVEALED
    assert snapshot.cells[3].status == CellStatus.REVEALED
    assert snapshot.phase == GamePhase.WON
    assert snapshot.cells[4].status == CellStatus.FLAGGED


def test_chord_in_idle_is_ignored(small_board):
    game = Game(small_board)
    before = game.snapshot
    assert game.dispatch(RevealAdjacent(small_board, 4)).snapshot is before


def test_previous_snapshots_stay_valid(small_board):
    game = Game(small_board, rng=FixedMines(8))
    before = game.snapshot
    game.reveal(0)
    assert before.phase == GamePhase.IDLE
    assert all(cell.status == CellStatus.HIDDEN for cell in before.cells)


class TestErrors:

    def test_invalid_index_keeps_snapshot(self, small_board):
        game = Game(small_board)
        before = game.snapshot
        for result in (game.reveal(9), game.toggle_flag(-1), game.reveal_adjacent(100)):
            assert not result.ok
            assert isinstance(result.error, InvalidIndexError)
            assert result.snapshot is before
        assert game.snapshot is before

    def test_invalid_index_after_loss(self, small_board):
        game = Game(BoardConfig(rows=1, columns=5, mine_count=2), rng=FixedMines(2, 4))
        game.reveal(0)
        game.reveal(2)
        assert isinstance(game.reveal(5).error, InvalidIndexError)

    def test_reduce_raises(self, small_board):
        game = Game(small_board)
        with pytest.raises(InvalidIndexError):
            reduce(game.snapshot, RevealAdjacent(small_board, 9))

    def test_too_many_mines(self):
        with pytest.raises(ConfigurationError):
            Game(BoardConfig(rows=3, columns=3, mine_count=9))
        assert Game(BoardConfig(rows=3, columns=3, mine_count=8)).phase == GamePhase.IDLE

    @pytest.mark.parametrize("board", [
        BoardConfig(rows=0, columns=3, mine_count=0),
        BoardConfig(rows=3, columns=-1, mine_count=0),
        BoardConfig(rows=3, columns=3, mine_count=-1),
    ])
    def test_bad_dimensions(self, board):
        with pytest.raises(ConfigurationError):
            board.validate()

    def test_reset_to_bad_board_keeps_round(self, small_board):
        game = Game(small_board)
        game.toggle_flag(0)
        before = game.snapshot
        result = game.dispatch(Reset(BoardConfig(rows=2, columns=2, mine_count=4)))
        assert isinstance(result.error, ConfigurationError)
        assert game.snapshot is before
        assert game.board == small_board

    def test_command_for_another_board_is_rejected(self, small_board):
        game = Game(small_board, rng=FixedMines(8))
        before = game.snapshot
        result = game.dispatch(Reveal(BoardConfig(rows=4, columns=4, mine_count=1), 0))
        assert isinstance(result.error, ConfigurationError)
        assert result.snapshot is before
        assert len(game.snapshot.cells) == 9
        assert not game.snapshot.mines_placed

    def test_reshaped_board_is_rejected(self):
        snapshot = new_snapshot(BoardConfig(rows=2, columns=3, mine_count=1))
        with pytest.raises(ConfigurationError):
            reduce(snapshot, Reveal(BoardConfig(rows=3, columns=2, mine_count=1), 0), FixedMines(5))


def test_reset_with_new_board(small_board):
    game = Game(small_board)
    game.toggle_flag(0)
    bigger = BoardConfig(rows=4, columns=5, mine_count=3)
    snapshot = game.reset(bigger).snapshot
    assert len(snapshot.cells) == 20
    assert snapshot.phase == GamePhase.IDLE
    assert game.board == bigger


def test_events_go_to_the_given_logger(small_board, caplog):
    round_log = logging.getLogger("tests.round")
    game = Game(small_board, rng=FixedMines(8), log=round_log)
    with caplog.at_level(logging.INFO):
        game.reveal(0)
        game.reveal(99)
    messages = [(record.name, record.getMessage()) for record in caplog.records]
    assert ("tests.round", "Round won") in messages
    assert any(message.startswith("Rejected Reveal") for _, message in messages)
    assert all(name == "tests.round" for name, _ in messages)
