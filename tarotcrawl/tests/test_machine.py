"""
Tests for the turn machine.

Tests:
- Event routing per state
- Published views
- End-of-turn guard order
- Restarting and full games
"""

import random

from ..config import DECK_SIZE, MAX_HEALTH
from ..rule_engine import EASY_RULES, RuleEngine
from ..session.machine import Event, EventType, TurnMachine, TurnState
from ..session.progress import InMemoryProgressStore


def _collect(machine):
    views = []
    machine.subscribe(views.append)
    return views


def _put_in_turn(machine, state):
    machine.state = TurnState.PLAYER_TURN
    machine.game_state = state


class TestStartup:
    """Tests for starting a dungeon."""

    def test_starts_in_menu(self, machine):
        assert machine.state is TurnState.MENU
        assert machine.history == [TurnState.MENU]
        assert machine.matches("Menu")

    def test_new_game_reaches_player_turn(self, machine, assert_partition):
        """NEW_GAME deals a full room and hands over the turn."""
        result = machine.send(Event.new_game())
        assert result.accepted
        assert not result.queued
        assert result.state is TurnState.PLAYER_TURN
        assert len(machine.game_state.room_cards) == 4
        assert len(machine.game_state.draw) == DECK_SIZE - 4
        assert_partition(machine.game_state)

    def test_new_game_history(self, machine):
        """History restarts at Dungeon.Start."""
        machine.send(Event.new_game())
        assert machine.history == [
            TurnState.START,
            TurnState.DEAL,
            TurnState.PLAYER_TURN_START,
            TurnState.PLAYER_TURN,
        ]

    def test_returning_player_gets_standard_dungeon(self, machine):
        views = _collect(machine)
        machine.send(Event.new_game())
        assert views[0].state == TurnState.STANDARD_DUNGEON.value
        assert views[-1].state == TurnState.PLAYER_TURN.value
        assert machine.matches("Dungeon")
        assert not machine.matches("Dung")


class TestEventRouting:
    """Tests for events the active state does not handle."""

    def test_fold_in_menu_is_dropped(self, machine):
        result = machine.send(Event.fold_card(0))
        assert not result.accepted
        assert machine.state is TurnState.MENU

    def test_escape_in_menu_is_dropped(self, machine):
        assert not machine.send(Event.escape()).accepted
        assert not machine.can_escape()

    def test_new_game_during_turn_is_dropped(self, machine):
        """A dungeon in progress ignores NEW_GAME."""
        machine.send(Event.new_game())
        before = machine.game_state
        assert not machine.send(Event.new_game()).accepted
        assert machine.game_state == before

    def test_fold_outside_room_is_refused(self, machine):
        machine.send(Event.new_game())
        outside = machine.game_state.draw[0]
        assert not machine.can_fold(outside)
        assert not machine.send(Event.fold_card(outside)).accepted
        assert machine.state is TurnState.PLAYER_TURN

    def test_fold_without_index_is_refused(self, machine):
        machine.send(Event.new_game())
        assert not machine.send(Event(event_type=EventType.FOLD_CARD)).accepted


class TestFold:
    """Tests for folding through the machine."""

    def test_fold_publishes_fold_and_end_turn(self, machine):
        """FoldCard carries the folding card; EndTurn has it cleared."""
        machine.send(Event.new_game())
        card = machine.game_state.room[0]
        views = _collect(machine)

        assert machine.send(Event.fold_card(card)).accepted
        assert [v.state for v in views] == [
            TurnState.FOLD_CARD.value,
            TurnState.END_TURN.value,
            TurnState.PLAYER_TURN.value,
        ]
        assert views[0].folding_card == card
        assert views[1].folding_card is None
        assert card in views[1].discard
        assert views[1].room[0] is None

    def test_unshielded_monster_fold(self, machine, build_state):
        """The 5 of Swords with no shield costs 5 health and is discarded."""
        _put_in_turn(machine, build_state(room=(4, 28, 42)))
        machine.send(Event.fold_card(4))
        state = machine.game_state
        assert state.health == MAX_HEALTH - 5
        assert state.last_monster_blocked == 5
        assert state.room == (None, 28, 42, None)
        assert state.discard == (4,)

    def test_clear_room_deals_next_room(self, machine, build_state):
        """Folding the last room card clears the room and deals again."""
        _put_in_turn(machine, build_state(room=(42,)))
        views = _collect(machine)

        machine.send(Event.fold_card(42))
        assert [v.state for v in views] == [
            TurnState.FOLD_CARD.value,
            TurnState.END_TURN.value,
            TurnState.CLEAR_ROOM.value,
            TurnState.DEAL.value,
            TurnState.PLAYER_TURN_START.value,
            TurnState.PLAYER_TURN.value,
        ]
        assert len(machine.game_state.room_cards) == 4
        assert not machine.game_state.did_escape_last_room


class TestEscape:
    """Tests for escaping through the machine."""

    def test_first_escape_is_allowed(self, machine, assert_partition):
        machine.send(Event.new_game())
        room = machine.game_state.room_cards
        views = _collect(machine)

        assert machine.send(Event.escape()).accepted
        assert [v.state for v in views] == [
            TurnState.ESCAPE.value,
            TurnState.DEAL.value,
            TurnState.PLAYER_TURN_START.value,
            TurnState.PLAYER_TURN.value,
        ]
        assert machine.game_state.draw[-4:] == room
        assert machine.game_state.did_escape_last_room
        assert_partition(machine.game_state)

    def test_second_escape_needs_a_monster_free_room(self, machine, build_state):
        """After an escape, only a room without monsters can be fled."""
        _put_in_turn(machine, build_state(room=(0, 28), did_escape_last_room=True))
        assert not machine.can_escape()
        assert not machine.send(Event.escape()).accepted

        _put_in_turn(machine, build_state(room=(28, 42), did_escape_last_room=True))
        assert machine.send(Event.escape()).accepted


class TestEndTurnGuards:
    """Tests for the order of end-of-turn checks."""

    def _last_monster(self, build_state, extra=()):
        # King of Swords is the only card left; it kills a 5-health player
        room = (13,) + tuple(extra)
        discard = tuple(i for i in range(DECK_SIZE) if i not in room)
        return build_state(room=room, discard=discard, draw=(), health=5)

    def test_win_beats_game_over(self, machine, build_state):
        """Dying on the last card of the dungeon is still a win."""
        _put_in_turn(machine, self._last_monster(build_state))
        machine.send(Event.fold_card(13))
        assert machine.game_state.health == 0
        assert machine.state is TurnState.WIN

    def test_game_over(self, machine, build_state):
        _put_in_turn(machine, self._last_monster(build_state, extra=(42,)))
        machine.send(Event.fold_card(13))
        assert machine.state is TurnState.GAME_OVER
        assert not machine.send(Event.fold_card(42)).accepted


class TestRestart:
    """Tests for NEW_GAME from a finished dungeon."""

    def test_restart_from_game_over(self, machine, build_state, assert_partition):
        machine.state = TurnState.GAME_OVER
        machine.game_state = build_state(room=(), health=0)
        views = _collect(machine)

        assert machine.send(Event.new_game()).accepted
        assert views[0].state == TurnState.RESTART.value
        assert machine.state is TurnState.PLAYER_TURN
        assert machine.game_state.health == MAX_HEALTH
        assert machine.history[0] is TurnState.START
        assert_partition(machine.game_state)

    def test_restart_from_win(self, machine):
        machine.state = TurnState.WIN
        assert machine.send(Event.new_game()).accepted
        assert machine.state is TurnState.PLAYER_TURN
        assert len(machine.game_state.draw) == DECK_SIZE - 4


class TestSubscribers:
    """Tests for subscription and re-entrant sends."""

    def test_unsubscribe(self, machine):
        views = []
        unsubscribe = machine.subscribe(views.append)
        unsubscribe()
        machine.send(Event.new_game())
        assert views == []

    def test_send_from_subscriber_is_queued(self, machine):
        """Events sent while notifying run after the current event."""
        results = []

        def escape_once(view):
            if view.state == TurnState.PLAYER_TURN.value and not results:
                results.append(machine.send(Event.escape()))

        machine.subscribe(escape_once)
        result = machine.send(Event.new_game())

        assert results[0].queued
        assert not results[0].accepted
        assert result.accepted
        assert machine.game_state.did_escape_last_room
        assert machine.state is TurnState.PLAYER_TURN


class TestFullGames:
    """Tests playing whole dungeons."""

    def test_monster_free_dungeon_is_won(self, machine, build_state):
        """With every monster discarded, folding everything wins."""
        monsters = tuple(range(28))
        _put_in_turn(machine, build_state(room=(28, 29, 30, 31), discard=monsters))

        while machine.state is TurnState.PLAYER_TURN:
            assert machine.send(Event.fold_card(machine.game_state.room_cards[0])).accepted

        assert machine.state is TurnState.WIN
        assert machine.game_state.health == MAX_HEALTH
        assert len(machine.game_state.discard) == DECK_SIZE

    def test_random_game_ends(self, assert_partition):
        """Any sequence of legal moves ends in Win or GameOver."""
        rng = random.Random(11)
        machine = TurnMachine(RuleEngine(EASY_RULES), InMemoryProgressStore(player_is_new=False), rng=rng)
        machine.send(Event.new_game())

        for _ in range(500):
            if machine.state is not TurnState.PLAYER_TURN:
                break
            assert_partition(machine.game_state)
            if rng.random() < 0.05:
                machine.send(Event.escape())
            else:
                machine.send(Event.fold_card(rng.choice(machine.game_state.room_cards)))

        assert machine.state in (TurnState.WIN, TurnState.GAME_OVER)


class TestSubscriberFailures:
    """Tests for subscribers that raise."""

    def test_failing_subscriber_does_not_strand_machine(self, machine, caplog):
        """A subscriber raising mid-chain still lets the chain complete."""
        failed = []

        def fail_on_deal(view):
            if view.state == TurnState.DEAL.value and not failed:
                failed.append(view.state)
                raise RuntimeError("renderer crashed")

        machine.subscribe(fail_on_deal)
        result = machine.send(Event.new_game())

        assert failed == [TurnState.DEAL.value]
        assert result.accepted
        assert machine.state is TurnState.PLAYER_TURN
        assert "Subscriber failed on Dungeon.Deal" in caplog.text
        assert machine.send(Event.fold_card(machine.game_state.room_cards[0])).accepted

    def test_later_subscribers_still_notified(self, machine):
        """One failing subscriber does not hide views from the others."""
        def broken(view):
            raise ValueError("broken")

        machine.subscribe(broken)
        views = _collect(machine)
        machine.send(Event.new_game())
        assert views[-1].state == TurnState.PLAYER_TURN.value


class TestHandlerTable:
    """Tests for the per-state handler table."""

    def test_table_is_built_once(self, machine):
        table = machine._handlers
        machine.send(Event.new_game())
        machine.send(Event.escape())
        assert machine._handlers is table
        assert machine._get_handler(EventType.NEW_GAME) is None
        assert machine._get_handler(EventType.ESCAPE) is not None
