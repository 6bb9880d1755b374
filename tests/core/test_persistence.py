"""Tests for state export/import and the undo log."""

import json

import pytest

from trainer.history import MAX_LOG_LIMIT, CardAdded, EventLog, TargetChanged
from trainer.persistence import (
    MAX_CARDS_DEALT,
    MAX_TAG,
    STATE_VERSION,
    InvalidStateError,
    SavedState,
    deserialize_state,
    dumps,
    loads,
    serialize_state,
)
from trainer.ranks import Rank
from trainer.settings import Settings


class TestSerialize:
    """Tests for serializing saved state."""

    def test_layout(self):
        state = SavedState(
            running_count=-2.5,
            cards_dealt=7,
            aces_seen=1,
            hands={"player": (Rank.ACE, Rank.TEN), "dealer": (Rank.SIX,), "table": ()},
            target="dealer",
        )
        data = serialize_state(state)
        assert data["version"] == STATE_VERSION
        assert data["shoe"] == {"running_count": -2.5, "cards_dealt": 7, "aces_seen": 1}
        assert data["hands"] == {"player": ["A", "T"], "dealer": ["6"], "table": []}
        assert data["target"] == "dealer"
        assert data["settings"]["count_system"] == "hilo"

    def test_dumps_is_stable(self):
        assert dumps(SavedState()) == dumps(SavedState())
        assert json.loads(dumps(SavedState()))["version"] == STATE_VERSION

    def test_round_trip(self):
        state = SavedState(
            settings=Settings(count_system="wong_halves", decks_in_shoe=2).clamped(),
            running_count=3.5,
            cards_dealt=30,
            aces_seen=2,
            hands={"player": (Rank.NINE,), "dealer": (), "table": (Rank.TWO, Rank.TWO)},
            target="player",
        )
        assert loads(dumps(state)) == state


class TestDeserialize:
    """Tests for validating imported state."""

    def test_missing_sections_default(self):
        state = deserialize_state({"version": STATE_VERSION})
        assert state == SavedState()

    def test_hand_ranks_normalized(self):
        state = deserialize_state({"version": 1, "hands": {"player": ["k", "10", 4]}})
        assert state.hands["player"] == (Rank.TEN, Rank.TEN, Rank.FOUR)

    def test_settings_clamped(self):
        state = deserialize_state({"version": 1, "settings": {"decks_in_shoe": 0}})
        assert state.settings.decks_in_shoe == 1

    @pytest.mark.parametrize(
        "data",
        [
            None,
            "state",
            {},
            {"version": 2},
            {"version": 1, "settings": "hilo"},
            {"version": 1, "shoe": []},
            {"version": 1, "shoe": {"running_count": "3"}},
            {"version": 1, "shoe": {"running_count": True}},
            {"version": 1, "shoe": {"running_count": float("inf")}},
            {"version": 1, "shoe": {"cards_dealt": 1.5}},
            {"version": 1, "shoe": {"aces_seen": -1}},
            {"version": 1, "shoe": {"cards_dealt": 3, "aces_seen": 4}},
            {"version": 1, "shoe": {"cards_dealt": MAX_CARDS_DEALT + 1}},
            {"version": 1, "shoe": {"cards_dealt": 10**400}},
            {"version": 1, "shoe": {"running_count": 1e308, "cards_dealt": 10}},
            {"version": 1, "shoe": {"running_count": -5}},
            {"version": 1, "hands": []},
            {"version": 1, "hands": {"player": "AT"}},
            {"version": 1, "hands": {"player": ["1"]}},
            {"version": 1, "hands": {"spectator": []}},
            {"version": 1, "target": None},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(InvalidStateError):
            deserialize_state(data)

    def test_counters_at_their_limits_accepted(self):
        state = deserialize_state(
            {"version": 1, "shoe": {"running_count": -MAX_TAG * 3, "cards_dealt": 3}}
        )
        assert state.running_count == -6.0
        assert deserialize_state(
            {"version": 1, "shoe": {"cards_dealt": MAX_CARDS_DEALT}}
        ).cards_dealt == MAX_CARDS_DEALT

    def test_invalid_json(self):
        with pytest.raises(InvalidStateError):
            loads("{version: 1")

    def test_non_text_rejected(self):
        with pytest.raises(InvalidStateError):
            loads(b'{"version": 1}')

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            loads("[]")


class TestEventLog:
    """Tests for the bounded undo log."""

    def test_lifo(self):
        log = EventLog()
        first, second = TargetChanged("table"), TargetChanged("player")
        log.push(first)
        log.push(second)
        assert log.pop() is second
        assert log.pop() is first
        assert log.pop() is None

    def test_oldest_dropped_when_full(self):
        log = EventLog(capacity=2)
        entries = [CardAdded("table", Rank.TWO, 1) for _ in range(3)]
        for entry in entries:
            log.push(entry)
        assert len(log) == 2
        assert list(log) == entries[1:]

    def test_capacity_clamped(self):
        assert EventLog(capacity=0).capacity == 1
        assert EventLog(capacity=10_000).capacity == MAX_LOG_LIMIT

    def test_clear(self):
        log = EventLog()
        log.push(TargetChanged("table"))
        log.clear()
        assert len(log) == 0
