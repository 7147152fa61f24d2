"""
Seat ledger tests - pure functions, no database
"""
import pytest

from cinema.services.errors import InsufficientCapacityError, InvalidInputError, SeatAlreadyTakenError
from cinema.services.seat_ledger import SeatState, release, reserve


def make_state(capacity, seats=()):
    return SeatState(capacity=capacity, reserved_count=len(seats), reserved_seats=tuple(seats))


class TestReserve:

    def test_reserve_on_empty_screening(self):
        decision = reserve(make_state(50), ["A2", "A1"])

        assert decision.accepted_seats == ("A1", "A2")
        assert decision.state.reserved_count == 2
        assert decision.state.reserved_seats == ("A1", "A2")
        assert decision.state.capacity == 50

    def test_reserve_merges_and_sorts(self):
        decision = reserve(make_state(50, ["A1", "C3"]), ["B2"])

        assert decision.state.reserved_seats == ("A1", "B2", "C3")
        assert decision.state.reserved_count == 3

    def test_overlapping_seat_is_rejected(self):
        state = make_state(50, ["A1", "A2"])

        with pytest.raises(SeatAlreadyTakenError) as exc_info:
            reserve(state, ["A1", "A3"])

        assert exc_info.value.seats == ["A1"]
        assert "A1" in str(exc_info.value)

    def test_full_screening_is_rejected(self):
        with pytest.raises(InsufficientCapacityError) as exc_info:
            reserve(make_state(2, ["A1", "A2"]), ["A3"])

        assert exc_info.value.requested == 1
        assert exc_info.value.available == 0

    def test_request_filling_screening_exactly(self):
        decision = reserve(make_state(3, ["A1"]), ["A2", "A3"])

        assert decision.state.reserved_count == 3

    def test_capacity_is_checked_before_overlap(self):
        with pytest.raises(InsufficientCapacityError):
            reserve(make_state(2, ["A1", "A2"]), ["A1"])

    def test_empty_request_is_invalid(self):
        with pytest.raises(InvalidInputError):
            reserve(make_state(10), [])

    def test_duplicate_labels_in_request_are_invalid(self):
        with pytest.raises(InvalidInputError):
            reserve(make_state(10), ["A1", "A1"])

    def test_input_state_is_not_modified(self):
        state = make_state(10, ["A1"])
        reserve(state, ["A2"])

        assert state.reserved_seats == ("A1",)
        assert state.reserved_count == 1


class TestRelease:

    def test_release_subset(self):
        state = release(make_state(50, ["A1", "A2", "B1"]), ["A1", "A2"])

        assert state.reserved_seats == ("B1",)
        assert state.reserved_count == 1

    def test_release_is_idempotent(self):
        once = release(make_state(50, ["A1", "A2", "B1"]), ["A1", "A2"])
        twice = release(once, ["A1", "A2"])

        assert twice == once

    def test_release_ignores_unknown_seats(self):
        state = release(make_state(50, ["A1"]), ["Z9"])

        assert state.reserved_seats == ("A1",)

    def test_release_recomputes_drifted_count(self):
        drifted = SeatState(capacity=10, reserved_count=7, reserved_seats=("A1", "A2", "A3"))

        state = release(drifted, ["A1"])

        assert state.reserved_count == 2

    def test_reserve_then_release_round_trip(self):
        original = make_state(10, ["B1", "C4"])

        decision = reserve(original, ["A1", "A2"])
        restored = release(decision.state, decision.accepted_seats)

        assert restored == original
