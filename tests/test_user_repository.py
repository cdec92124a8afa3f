"""SQLAlchemyUserRepository against a real SQLite database."""

import pytest
from sqlalchemy.exc import DataError, IntegrityError, OperationalError, ProgrammingError

from app.core.exceptions import DuplicateEmailError, StoreUnavailableError, ValidationFailedError
from app.domain.models.user import User
from app.domain.schemas.user import UserCreate
from app.infrastructure.database import Database
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def _repo(db_session):
    return SQLAlchemyUserRepository(db_session, User)


def test_create_assigns_id_and_timestamps(database):
    with database.session() as db:
        user = _repo(db).create(UserCreate(name="Ana", email="ana@x.com", phone="123"))

    assert isinstance(user.id, int)
    assert user.name == "Ana"
    assert user.created_at is not None
    assert user.updated_at is not None


def test_ids_are_not_reused(database):
    with database.session() as db:
        repo = _repo(db)
        first = repo.create({"name": "A", "email": "a@x.com", "phone": "1"})
        second = repo.create({"name": "B", "email": "b@x.com", "phone": "2"})
    assert second.id > first.id


def test_duplicate_email_is_rejected_without_second_row(database):
    with database.session() as db:
        repo = _repo(db)
        repo.create({"name": "Ana", "email": "ana@x.com", "phone": "123"})
        with pytest.raises(DuplicateEmailError) as excinfo:
            repo.create({"name": "Other", "email": "ana@x.com", "phone": "456"})
        assert excinfo.value.status_code == 409
        assert [u.name for u in repo.list_all()] == ["Ana"]


def test_model_rejects_empty_values(database):
    with database.session() as db:
        repo = _repo(db)
        with pytest.raises(ValidationFailedError) as excinfo:
            repo.create({"name": "", "email": "ana@x.com", "phone": "123"})
        assert excinfo.value.fields == ["name"]
        assert repo.list_all() == []


def test_model_rejects_bad_email(database):
    with database.session() as db:
        with pytest.raises(ValidationFailedError) as excinfo:
            _repo(db).create({"name": "Ana", "email": "not-an-email", "phone": "123"})
    assert excinfo.value.fields == ["email"]


def test_list_all_is_newest_first_and_restartable(database):
    with database.session() as db:
        repo = _repo(db)
        for i in range(4):
            repo.create({"name": f"user{i}", "email": f"u{i}@x.com", "phone": str(i)})

        first = [u.name for u in repo.list_all()]
        second = [u.name for u in repo.list_all()]

    assert first == ["user3", "user2", "user1", "user0"]
    assert second == first


def test_unreachable_database_raises_store_unavailable(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'missing' / 'users.db'}")
    try:
        with database.session() as db:
            with pytest.raises(StoreUnavailableError) as excinfo:
                _repo(db).list_all()
    finally:
        database.dispose()

    assert excinfo.value.status_code == 500
    assert excinfo.value.to_response() == {"error": "Internal server error", "code": "StoreUnavailable"}


class FailingSession:
    """Session stand-in whose commit raises the given driver error."""

    def __init__(self, error):
        self.error = error
        self.rolled_back = False

    def add(self, obj):
        pass

    def commit(self):
        raise self.error

    def refresh(self, obj):
        pass

    def rollback(self):
        self.rolled_back = True


def _create_with(error):
    session = FailingSession(error)
    payload = {"name": "Ana", "email": "ana@x.com", "phone": "123"}
    try:
        _repo(session).create(payload)
    finally:
        assert session.rolled_back is True


def test_data_error_becomes_validation_failure():
    with pytest.raises(ValidationFailedError) as excinfo:
        _create_with(DataError("INSERT", {}, Exception("value too long for type character varying(255)")))
    assert excinfo.value.status_code == 400


def test_non_unique_constraint_becomes_validation_failure():
    with pytest.raises(ValidationFailedError) as excinfo:
        _create_with(IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: users.phone")))
    assert excinfo.value.status_code == 400
    assert excinfo.value.to_response()["code"] == "ValidationFailed"


def test_lost_connection_becomes_store_unavailable():
    with pytest.raises(StoreUnavailableError):
        _create_with(OperationalError("INSERT", {}, Exception("server closed the connection unexpectedly")))


def test_programming_errors_are_not_reported_as_unavailable():
    with pytest.raises(ProgrammingError):
        _create_with(ProgrammingError("INSERT", {}, Exception('relation "users" does not exist')))


def test_over_long_name_is_rejected_before_insert(database):
    with database.session() as db:
        repo = _repo(db)
        with pytest.raises(ValidationFailedError) as excinfo:
            repo.create(UserCreate.model_construct(name="x" * 256, email="ana@x.com", phone="123"))
        assert repo.list_all() == []
    assert excinfo.value.fields == ["name"]
