"""
Seat ledger: decides whether a block of seats can be granted on a screening.

Both functions are pure. They take a snapshot of the screening's seat state,
read inside the caller's transaction, and return the state to write back.
"""
from dataclasses import dataclass
from typing import Iterable, Tuple

from cinema.services.errors import InsufficientCapacityError, InvalidInputError, SeatAlreadyTakenError


@dataclass(frozen=True)
class SeatState:
    capacity: int
    reserved_count: int
    reserved_seats: Tuple[str, ...]

    @property
    def available(self) -> int:
        return self.capacity - self.reserved_count


@dataclass(frozen=True)
class ReserveDecision:
    state: SeatState
    accepted_seats: Tuple[str, ...]


def reserve(state: SeatState, requested_seats: Iterable[str]) -> ReserveDecision:
    """
    Grant requested_seats on top of state.

    Raises:
        InvalidInputError: empty request or a label requested twice
        InsufficientCapacityError: not enough free seats left
        SeatAlreadyTakenError: a requested label is already reserved
    """
    requested = list(requested_seats)
    if not requested:
        raise InvalidInputError("at least one seat must be requested")
    if len(set(requested)) != len(requested):
        raise InvalidInputError("duplicate seat labels in request")

    if state.capacity < state.reserved_count + len(requested):
        raise InsufficientCapacityError(len(requested), max(state.available, 0))

    taken = set(requested) & set(state.reserved_seats)
    if taken:
        raise SeatAlreadyTakenError(taken)

    new_state = SeatState(
        capacity=state.capacity,
        reserved_count=state.reserved_count + len(requested),
        reserved_seats=tuple(sorted(set(state.reserved_seats) | set(requested))),
    )
    return ReserveDecision(state=new_state, accepted_seats=tuple(sorted(requested)))


def release(state: SeatState, seats: Iterable[str]) -> SeatState:
    """Remove seats from state; labels that are not reserved are ignored"""
    released = set(seats)
    remaining = tuple(seat for seat in state.reserved_seats if seat not in released)
    # Recomputed from the remaining labels, never decremented
    return SeatState(
        capacity=state.capacity,
        reserved_count=len(remaining),
        reserved_seats=remaining,
    )
