from collections.abc import Callable

import pytest

from conftest import FirstChoice, Harness
from tic_tac_toe.engine.game_engine import GameEngine
from tic_tac_toe.event_bus.event_bus import EventBus, MoveRequested, StartTurn
from tic_tac_toe.game.game import Draw, InProgress, Win

type MakeHarness = Callable[..., Harness]


# ============================================================================
# HAPPY PATH TESTS - Player vs Player
# ============================================================================


class TestLocalHumanVsHuman:
    """Test a local human vs human game driven through the UI."""

    def test_complete_game_human_vs_human(self, make_harness: MakeHarness) -> None:
        """X wins with the main diagonal."""
        harness = make_harness("pvp")
        ui = harness.ui

        assert ui.input_enabled
        assert ui.last_status == "Player X's turn"

        for index, symbol in ((0, "X"), (3, "O"), (4, "X"), (1, "O")):
            ui.simulate_move(index)
            assert ui.input_enabled
            assert ui.last_state.board[index] == symbol

        ui.simulate_move(8)

        assert ui.game_finished
        assert ui.end_message == "Player X wins"
        assert not ui.input_enabled
        assert ui.input_errors == []

    def test_draw_through_engine(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")

        for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
            harness.engine.apply_move(index)

        assert harness.engine.state.outcome == Draw()
        assert harness.engine.state.move_count == 9
        assert harness.engine.status == "Draw"
        assert harness.ui.end_message == "Draw"

    def test_apply_move_returns_new_state(self, make_harness: MakeHarness) -> None:
        engine = make_harness("pvp").engine

        state = engine.apply_move(4)

        assert state is engine.state
        assert state.board[4] == "X"
        assert state.current_player == "O"

    def test_generation_increases_on_every_change(self, make_harness: MakeHarness) -> None:
        engine = make_harness("pvp").engine
        start = engine.generation

        engine.apply_move(0)
        assert engine.generation == start + 1

        engine.apply_move(0)  # rejected
        assert engine.generation == start + 1

        engine.new_game()
        assert engine.generation == start + 2


class TestNewGame:
    """Test resetting the engine."""

    def test_new_game_resets_everything(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")
        for index in (0, 3, 1, 4, 2):
            harness.engine.apply_move(index)
        assert harness.engine.state.outcome == Win("X")

        state = harness.engine.new_game()

        assert state.board == (None,) * 9
        assert state.current_player == "X"
        assert state.move_count == 0
        assert state.outcome == InProgress()
        assert state.mode == "pvp"
        assert harness.ui.input_enabled
        assert not harness.ui.game_finished

    def test_new_game_switches_mode(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")

        harness.ui.simulate_new_game("pvc")

        assert harness.engine.state.mode == "pvc"
        assert harness.ui.last_state.mode == "pvc"

    def test_new_game_keeps_previous_mode(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvc")
        harness.engine.apply_move(4)

        harness.ui.simulate_new_game()

        assert harness.engine.state.mode == "pvc"
        assert harness.engine.state.move_count == 0


# ============================================================================
# ERROR HANDLING TESTS
# ============================================================================


class TestIllegalMoves:
    """Illegal moves are no-ops for the caller, reported to observers."""

    def test_occupied_cell_is_a_noop(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")
        harness.ui.simulate_move(0)
        before = harness.engine.state

        harness.ui.simulate_move(0)

        assert harness.engine.state is before
        assert harness.engine.state.current_player == "O"
        assert harness.ui.input_errors == ["Cell occupied"]
        # Input is handed back so the player can try again
        assert harness.ui.input_enabled

    def test_direct_call_never_raises(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")
        harness.engine.apply_move(0)
        before = harness.engine.state

        assert harness.engine.apply_move(0) is before
        assert harness.engine.apply_move(-1) is before
        assert harness.engine.apply_move(9) is before
        assert [e.error_msg for e in harness.invalid_moves] == [
            "Cell occupied",
            "Move out of bounds",
            "Move out of bounds",
        ]

    def test_moves_after_game_end_are_ignored(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")
        for index in (0, 3, 1, 4, 2):
            harness.engine.apply_move(index)
        final = harness.engine.state
        updates = len(harness.ui.states)

        for index in (5, 6, 7, 8):
            harness.engine.apply_move(index)

        assert harness.engine.state is final
        assert harness.engine.state.outcome == Win("X")
        assert len(harness.ui.states) == updates
        assert {e.error_msg for e in harness.invalid_moves} == {"Game over"}

    def test_cannot_move_when_input_disabled(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")
        harness.ui.simulate_move(0)
        harness.ui._disable_input()

        with pytest.raises(RuntimeError, match="Input is not enabled"):
            harness.ui.simulate_move(1)

    def test_stale_move_request_is_discarded(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")
        stale = harness.engine.generation
        harness.engine.apply_move(0)

        harness.setup.event_bus.publish(MoveRequested("O", 4, stale))

        assert harness.engine.state.board[4] is None
        assert harness.engine.state.move_count == 1

    def test_current_move_request_is_applied(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")
        harness.engine.apply_move(0)

        harness.setup.event_bus.publish(MoveRequested("O", 4, harness.engine.generation))

        assert harness.engine.state.board[4] == "O"


# ============================================================================
# Player vs Computer
# ============================================================================


class TestComputerMoveOperation:
    """Test GameEngine.computer_move, the immediate (undelayed) computer move."""

    def test_noop_in_pvp(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvp")
        harness.engine.apply_move(0)

        assert harness.engine.computer_move() is None
        assert harness.engine.state.move_count == 1

    def test_noop_on_human_turn(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvc")

        assert harness.engine.computer_move() is None
        assert harness.engine.state.move_count == 0

    def test_picks_empty_cell(self) -> None:
        bus = EventBus()
        rng = FirstChoice()
        engine = GameEngine(bus, mode="pvc", rng=rng)
        engine.apply_move(0)

        index = engine.computer_move()

        assert index == 1
        assert rng.seen == [[1, 2, 3, 4, 5, 6, 7, 8]]
        assert engine.state.board[1] == "O"
        assert engine.state.current_player == "X"

    def test_human_cannot_move_for_computer(self, make_harness: MakeHarness) -> None:
        harness = make_harness("pvc")
        harness.engine.apply_move(0)
        before = harness.engine.state

        harness.engine.apply_move(4)

        assert harness.engine.state is before
        assert harness.ui.input_errors == ["Not your turn"]
        assert not harness.ui.input_enabled
        assert harness.engine.status == "Computer is thinking"

    def test_start_turn_carries_mode_and_generation(self) -> None:
        bus = EventBus()
        engine = GameEngine(bus, mode="pvc")
        turns: list[StartTurn] = []
        bus.subscribe(StartTurn, turns.append)

        engine.start()
        engine.apply_move(4)

        assert turns == [StartTurn("X", "pvc", 0), StartTurn("O", "pvc", 1)]
