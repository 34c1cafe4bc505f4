from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from examhub.application.errors import InternalError
from examhub.domain.entities import Role
from examhub.infrastructure.repositories import UserRepository


def test_create_and_lookup(db):
    repo = UserRepository(db)
    user = repo.create("repo@example.com", "Repo", "hash", role=Role.TEACHER)
    assert user.id is not None
    assert repo.get_by_id(user.id) == user
    assert repo.get_by_email("repo@example.com") == user
    assert repo.get_password_hash("repo@example.com") == (user, "hash")
    assert repo.get_by_id(user.id + 100) is None


def test_update_only_provided_fields(db, make_user):
    user = make_user(name="Keep", role=Role.STUDENT)
    repo = UserRepository(db)
    updated = repo.update(user.id, role=Role.ADMIN)
    assert (updated.name, updated.role, updated.email) == ("Keep", Role.ADMIN, user.email)


def test_update_refuses_immutable_fields(db, make_user):
    user = make_user()
    with pytest.raises(ValueError):
        UserRepository(db).update(user.id, email="new@example.com")
    assert UserRepository(db).get_by_id(user.id).email == user.email


def test_update_missing_user(db):
    assert UserRepository(db).update(999, name="Nobody") is None


def test_commit_failure_rolls_back(db, make_user):
    user = make_user(name="Before")
    repo = UserRepository(db)
    error = OperationalError("UPDATE users", {}, Exception("database is locked"))
    with patch.object(db, "commit", side_effect=error), patch.object(db, "rollback", wraps=db.rollback) as rollback:
        with pytest.raises(InternalError):
            repo.update(user.id, name="After")
        assert rollback.called
    assert repo.get_by_id(user.id).name == "Before"


def test_inactive_user_has_no_credentials(db, make_user, stored_user):
    user = make_user()
    row = stored_user(user.id)
    row.is_active = False
    db.commit()
    assert UserRepository(db).get_password_hash(user.email) is None
