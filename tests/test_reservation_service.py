"""
Reservation transaction tests against a real (SQLite) database
"""
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from cinema.core.config import settings
from cinema.models import Reservation
from cinema.schemas import HallUpdate
from cinema.services import HallService, seat_ledger
from cinema.services.entity_store import EntityStore
from cinema.services.errors import (
    ConflictError,
    InsufficientCapacityError,
    MovieNotFoundError,
    ReservationNotFoundError,
    ScreeningNotFoundError,
    SeatAlreadyTakenError,
    UnavailableError,
    UserNotFoundError,
)
from cinema.services.reservation_service import ReservationService


@pytest.fixture
def reserve(session_factory):
    """Run create_reservation in its own session, like one request"""
    def _reserve(seeded, seats, username=None, idempotency_key=None, **overrides):
        params = dict(
            username=username or seeded.username,
            movie_id=seeded.movie_id,
            date=seeded.date,
            time=seeded.time,
            hall=seeded.hall,
        )
        params.update(overrides)
        with session_factory() as db:
            return ReservationService.create_reservation(
                db, seats=seats, idempotency_key=idempotency_key, **params
            )
    return _reserve


@pytest.fixture
def cancel(session_factory):
    def _cancel(reservation_id):
        with session_factory() as db:
            return ReservationService.cancel_reservation(db, reservation_id)
    return _cancel


@pytest.fixture
def count_reservations(session_factory):
    def _count():
        with session_factory() as db:
            return db.scalar(select(func.count(Reservation.id)))
    return _count


def assert_ledger_consistent(session_factory, repertoire_id):
    """Reserved count, seat list and reservation records all agree"""
    with session_factory() as db:
        screening = EntityStore(db).get_screening_by_id(repertoire_id)
        reservations = db.scalars(
            select(Reservation).where(Reservation.repertoire_id == repertoire_id)
        ).all()
        booked = sorted(seat for r in reservations for seat in r.reserv_seats)

        assert screening.num_of_res_tickets == len(screening.reserv_seats)
        assert len(set(screening.reserv_seats)) == len(screening.reserv_seats)
        assert screening.num_of_res_tickets <= screening.num_of_tickets
        assert set(booked) <= set(screening.reserv_seats)


class TestCreateReservation:

    def test_reservation_is_created(self, seed, reserve, get_screening):
        seeded = seed(capacity=50)

        reservation = reserve(seeded, ["A2", "A1"])

        assert reservation.id is not None
        assert reservation.username == "alice"
        assert reservation.user_id == seeded.user_id
        assert reservation.movie_id == seeded.movie_id
        assert reservation.movie_title == "Casablanca"
        assert reservation.repertoire_id == seeded.repertoire_id
        assert reservation.date == seeded.date
        assert reservation.time == seeded.time
        assert reservation.hall == seeded.hall
        assert reservation.creation_date is not None
        assert reservation.reserv_seats == ["A1", "A2"]

        screening = get_screening(seeded.repertoire_id)
        assert screening.num_of_res_tickets == 2
        assert screening.reserv_seats == ["A1", "A2"]

    def test_overlapping_seats_are_rejected(self, seed, reserve, get_screening, count_reservations):
        seeded = seed(capacity=50)
        reserve(seeded, ["A1", "A2"])

        with pytest.raises(SeatAlreadyTakenError):
            reserve(seeded, ["A1", "A3"])

        screening = get_screening(seeded.repertoire_id)
        assert screening.reserv_seats == ["A1", "A2"]
        assert screening.num_of_res_tickets == 2
        assert count_reservations() == 1

    def test_full_screening_is_rejected(self, seed, reserve, get_screening, count_reservations):
        seeded = seed(capacity=2, reserved_seats=["A1", "A2"])

        with pytest.raises(InsufficientCapacityError):
            reserve(seeded, ["A3"])

        screening = get_screening(seeded.repertoire_id)
        assert screening.reserv_seats == ["A1", "A2"]
        assert screening.num_of_res_tickets == 2
        assert count_reservations() == 0

    def test_unknown_movie(self, seed, reserve, count_reservations):
        seeded = seed()

        with pytest.raises(MovieNotFoundError):
            reserve(seeded, ["A1"], movie_id=9999)

        assert count_reservations() == 0

    def test_unknown_user(self, seed, reserve, count_reservations):
        seeded = seed()

        with pytest.raises(UserNotFoundError):
            reserve(seeded, ["A1"], username="nobody")

        assert count_reservations() == 0

    def test_screening_is_never_created_on_demand(self, seed, reserve, count_reservations):
        seeded = seed()

        with pytest.raises(ScreeningNotFoundError):
            reserve(seeded, ["A1"], time="21:00")

        assert count_reservations() == 0

    def test_failed_insert_rolls_back_seat_update(
        self, seed, reserve, get_screening, count_reservations, monkeypatch
    ):
        seeded = seed(capacity=10, reserved_seats=["B1"])
        before = get_screening(seeded.repertoire_id)

        def broken_insert(self, reservation):
            raise OperationalError("INSERT INTO reservations", {}, Exception("disk I/O error"))

        monkeypatch.setattr(EntityStore, "insert_reservation", broken_insert)

        with pytest.raises(UnavailableError):
            reserve(seeded, ["A1"])

        after = get_screening(seeded.repertoire_id)
        assert after.reserv_seats == before.reserv_seats
        assert after.num_of_res_tickets == before.num_of_res_tickets
        assert after.version == before.version
        assert count_reservations() == 0

    def test_reservations_respect_capacity_invariant(self, seed, reserve, session_factory):
        seeded = seed(capacity=5)

        reserve(seeded, ["A1", "A2"])
        reserve(seeded, ["B1"])
        with pytest.raises(InsufficientCapacityError):
            reserve(seeded, ["C1", "C2", "C3"])
        reserve(seeded, ["C1", "C2"])

        assert_ledger_consistent(session_factory, seeded.repertoire_id)


class TestCancelReservation:

    def test_cancel_releases_only_own_seats(self, seed, reserve, cancel, get_screening):
        seeded = seed(capacity=50, reserved_seats=["B1"])
        reservation = reserve(seeded, ["A1", "A2"])
        assert get_screening(seeded.repertoire_id).reserv_seats == ["A1", "A2", "B1"]

        cancel(reservation.id)

        screening = get_screening(seeded.repertoire_id)
        assert screening.reserv_seats == ["B1"]
        assert screening.num_of_res_tickets == 1

    def test_create_then_cancel_restores_state(self, seed, reserve, cancel, get_screening, count_reservations):
        seeded = seed(capacity=10, reserved_seats=["C3", "C4"])
        before = get_screening(seeded.repertoire_id)

        reservation = reserve(seeded, ["A1", "A2", "A3"])
        cancel(reservation.id)

        after = get_screening(seeded.repertoire_id)
        assert after.reserv_seats == before.reserv_seats
        assert after.num_of_res_tickets == before.num_of_res_tickets
        assert count_reservations() == 0

    def test_cancel_unknown_reservation(self, cancel):
        with pytest.raises(ReservationNotFoundError):
            cancel(12345)

    def test_cancel_twice(self, seed, reserve, cancel, get_screening):
        seeded = seed()
        reservation = reserve(seeded, ["A1"])
        cancel(reservation.id)

        with pytest.raises(ReservationNotFoundError):
            cancel(reservation.id)

        assert get_screening(seeded.repertoire_id).num_of_res_tickets == 0

    def test_cancel_with_missing_screening(self, seed, reserve, cancel, session_factory, monkeypatch):
        seeded = seed()
        reservation = reserve(seeded, ["A1"])

        monkeypatch.setattr(EntityStore, "get_screening_by_id", lambda self, repertoire_id: None)

        with pytest.raises(ScreeningNotFoundError):
            cancel(reservation.id)

        with session_factory() as db:
            assert db.get(Reservation, reservation.id) is not None

    def test_failed_delete_rolls_back_seat_release(
        self, seed, reserve, cancel, get_screening, session_factory, monkeypatch
    ):
        seeded = seed(reserved_seats=["B1"])
        reservation = reserve(seeded, ["A1", "A2"])
        before = get_screening(seeded.repertoire_id)

        def broken_delete(self, reservation):
            raise OperationalError("DELETE FROM reservations", {}, Exception("database is locked"))

        monkeypatch.setattr(EntityStore, "delete_reservation", broken_delete)

        with pytest.raises(UnavailableError):
            cancel(reservation.id)

        after = get_screening(seeded.repertoire_id)
        assert after.reserv_seats == before.reserv_seats == ["A1", "A2", "B1"]
        assert after.num_of_res_tickets == before.num_of_res_tickets
        assert after.version == before.version
        with session_factory() as db:
            assert db.get(Reservation, reservation.id) is not None


class TestConcurrency:

    def test_interleaved_writer_forces_retry(self, seed, add_user, reserve, get_screening, monkeypatch):
        """A competing reservation commits between our read and our write"""
        seeded = seed(capacity=10)
        add_user("bob")
        original_reserve = seat_ledger.reserve
        calls = []

        def interleaved(state, seats):
            calls.append(list(seats))
            if len(calls) == 1:
                reserve(seeded, ["B1"], username="bob")
            return original_reserve(state, seats)

        monkeypatch.setattr(seat_ledger, "reserve", interleaved)

        reservation = reserve(seeded, ["A1"])

        # first attempt, bob's reservation, then the retry on fresh state
        assert calls == [["A1"], ["B1"], ["A1"]]
        assert reservation.reserv_seats == ["A1"]
        screening = get_screening(seeded.repertoire_id)
        assert screening.reserv_seats == ["A1", "B1"]
        assert screening.num_of_res_tickets == 2

    def test_hall_rename_between_read_and_write_forces_reread(
        self, seed, reserve, get_screening, count_reservations, session_factory, monkeypatch
    ):
        """A reservation never commits under a hall name renamed after it was read"""
        seeded = seed(capacity=10)
        original_reserve = seat_ledger.reserve
        calls = []

        def interleaved(state, seats):
            calls.append(list(seats))
            if len(calls) == 1:
                with session_factory() as db:
                    hall = EntityStore(db).get_hall_by_name(seeded.hall)
                    hall_id = hall.id
                with session_factory() as db:
                    HallService.update_hall(db, hall_id, HallUpdate(name="Sala 9"))
            return original_reserve(state, seats)

        monkeypatch.setattr(seat_ledger, "reserve", interleaved)

        # the retry looks the screening up again under the old hall name
        with pytest.raises(ScreeningNotFoundError):
            reserve(seeded, ["A1"])

        assert calls == [["A1"]]
        assert count_reservations() == 0
        screening = get_screening(seeded.repertoire_id)
        assert screening.hall == "Sala 9"
        assert screening.reserv_seats == []

    def test_loser_rereads_and_sees_no_capacity(self, seed, add_user, reserve, get_screening, monkeypatch):
        seeded = seed(capacity=2)
        add_user("bob")
        original_reserve = seat_ledger.reserve
        calls = []

        def interleaved(state, seats):
            calls.append(list(seats))
            if len(calls) == 1:
                reserve(seeded, ["B1", "B2"], username="bob")
            return original_reserve(state, seats)

        monkeypatch.setattr(seat_ledger, "reserve", interleaved)

        with pytest.raises(InsufficientCapacityError):
            reserve(seeded, ["A1"])

        screening = get_screening(seeded.repertoire_id)
        assert screening.reserv_seats == ["B1", "B2"]
        assert screening.num_of_res_tickets == 2

    def test_conflict_after_retries_exhausted(self, seed, reserve, get_screening, monkeypatch):
        seeded = seed()
        attempts = []

        def always_stale(self, screening, reserved_count, reserved_seats):
            attempts.append(reserved_count)
            raise ConflictError("screening was modified concurrently")

        monkeypatch.setattr(EntityStore, "update_screening_seats", always_stale)

        with pytest.raises(ConflictError):
            reserve(seeded, ["A1"])

        assert len(attempts) == settings.RESERVATION_MAX_RETRIES + 1
        assert get_screening(seeded.repertoire_id).num_of_res_tickets == 0

    def test_concurrent_requests_never_overbook(self, seed, add_user, reserve, session_factory):
        seeded = seed(capacity=3)
        add_user("bob")
        barrier = threading.Barrier(2)

        def attempt(username, seats):
            barrier.wait()
            try:
                return reserve(seeded, seats, username=username)
            except (InsufficientCapacityError, ConflictError) as e:
                return e

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [
                pool.submit(attempt, "alice", ["A1", "A2"]),
                pool.submit(attempt, "bob", ["B1", "B2"]),
            ]
            results = [f.result() for f in futures]

        successes = [r for r in results if isinstance(r, Reservation)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1

        with session_factory() as db:
            screening = EntityStore(db).get_screening_by_id(seeded.repertoire_id)
            assert screening.num_of_res_tickets == 2
            assert screening.reserv_seats == successes[0].reserv_seats
        assert_ledger_consistent(session_factory, seeded.repertoire_id)


class TestIdempotency:

    def test_repeated_key_returns_original(self, seed, reserve, get_screening, count_reservations):
        seeded = seed()

        first = reserve(seeded, ["A1", "A2"], idempotency_key="req-1")
        second = reserve(seeded, ["A1", "A2"], idempotency_key="req-1")

        assert second.id == first.id
        assert count_reservations() == 1
        assert get_screening(seeded.repertoire_id).num_of_res_tickets == 2

    def test_different_keys_are_independent(self, seed, reserve, count_reservations):
        seeded = seed()

        reserve(seeded, ["A1"], idempotency_key="req-1")
        reserve(seeded, ["A2"], idempotency_key="req-2")

        assert count_reservations() == 2

    def test_key_committed_concurrently_is_replayed(self, seed, reserve, get_screening, monkeypatch):
        """The key check misses, then the unique index catches the duplicate"""
        seeded = seed()
        first = reserve(seeded, ["A1"], idempotency_key="req-1")

        original_lookup = EntityStore.get_reservation_by_idempotency_key
        lookups = []

        def miss_once(self, key):
            lookups.append(key)
            if len(lookups) == 1:
                return None
            return original_lookup(self, key)

        monkeypatch.setattr(EntityStore, "get_reservation_by_idempotency_key", miss_once)

        replayed = reserve(seeded, ["B1"], idempotency_key="req-1")

        assert replayed.id == first.id
        screening = get_screening(seeded.repertoire_id)
        assert screening.reserv_seats == ["A1"]
        assert screening.num_of_res_tickets == 1


class TestListReservations:

    def test_newest_first(self, seed, reserve, session_factory):
        seeded = seed()
        first = reserve(seeded, ["A1"])
        second = reserve(seeded, ["A2"])

        with session_factory() as db:
            reservations = ReservationService.list_reservations_for_user(db, "alice")

        assert [r.id for r in reservations] == [second.id, first.id]

    def test_other_users_are_excluded(self, seed, reserve, session_factory):
        seeded = seed()
        reserve(seeded, ["A1"])

        with session_factory() as db:
            assert ReservationService.list_reservations_for_user(db, "bob") == []
