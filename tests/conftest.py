"""
Test configuration.

Settings are read once at import time, so the environment is prepared before
anything from the cinema package is imported.
"""
import os
import tempfile

_BOOTSTRAP_DIR = tempfile.mkdtemp(prefix="cinema-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_BOOTSTRAP_DIR, 'bootstrap.db')}"
os.environ["REDIS_ENABLED"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-0123456789abcdef0123456789abcdef"
os.environ["RESERVATION_RETRY_DELAY"] = "0.001"

from dataclasses import dataclass
from datetime import date

import pytest
from fastapi.testclient import TestClient

from cinema.core.database import create_db_engine, create_session_factory, get_db, init_db
from cinema.core.security import create_access_token
from cinema.main import app
from cinema.models import Hall, Movie, Repertoire, User

SCREENING_DATE = date(2025, 6, 1)
SCREENING_TIME = "18:30"
HALL_NAME = "Sala 1"


@dataclass
class Seeded:
    username: str
    user_id: int
    movie_id: int
    movie_title: str
    repertoire_id: int
    date: date
    time: str
    hall: str


@pytest.fixture
def db_engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'cinema.db'}")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token, _ = create_access_token("tester", "user")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def add_user(session_factory):
    """Insert a user without going through bcrypt"""
    def _add_user(username: str) -> int:
        with session_factory() as db:
            with db.begin():
                user = User(username=username, password_hash="not-a-real-hash", roles=["user"])
                db.add(user)
            return user.id
    return _add_user


@pytest.fixture
def seed(session_factory, add_user):
    """
    Create a user, a hall, a movie and one screening of it.

    `reserved_seats` pre-fills the screening's seat state without a matching
    reservation record.
    """
    def _seed(capacity: int = 50, reserved_seats=(), username: str = "alice") -> Seeded:
        user_id = add_user(username)
        with session_factory() as db:
            with db.begin():
                hall = Hall(name=HALL_NAME, rows=["A", "B", "C"], cols=list(range(1, 11)))
                movie = Movie(title="Casablanca", duration=102, genre="Drama")
                db.add_all([hall, movie])
                db.flush()
                screening = Repertoire(
                    movie_id=movie.id,
                    date=SCREENING_DATE,
                    time=SCREENING_TIME,
                    hall=HALL_NAME,
                    num_of_tickets=capacity,
                    num_of_res_tickets=len(reserved_seats),
                    reserv_seats=sorted(reserved_seats),
                )
                db.add(screening)
            return Seeded(
                username=username,
                user_id=user_id,
                movie_id=movie.id,
                movie_title=movie.title,
                repertoire_id=screening.id,
                date=SCREENING_DATE,
                time=SCREENING_TIME,
                hall=HALL_NAME,
            )
    return _seed


@pytest.fixture
def get_screening(session_factory):
    """Read a screening in a fresh session"""
    def _get(repertoire_id: int) -> Repertoire:
        with session_factory() as db:
            return db.get(Repertoire, repertoire_id)
    return _get


@pytest.fixture
def make_reservation(session_factory):
    """Reserve seats through the transaction service, bypassing HTTP"""
    from cinema.services.reservation_service import ReservationService

    def _make(seeded: Seeded, seats, username: str = None):
        with session_factory() as db:
            return ReservationService.create_reservation(
                db,
                username=username or seeded.username,
                movie_id=seeded.movie_id,
                date=seeded.date,
                time=seeded.time,
                hall=seeded.hall,
                seats=seats,
            )
    return _make
