import pytest

from budget_app.db.session import Base, engine, SessionLocal
from budget_app.models.user import User, new_user_id
from budget_app.services.users import (
    DuplicateEmailError,
    count_by_email,
    find_by_email,
    find_by_user_id,
    insert_user,
    list_page,
)


@pytest.fixture(autouse=True)
def _reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def make_user(email: str) -> User:
    return User(user_id=new_user_id(), email=email, name="Test User", user_type="USER", password="hashed")


def test_insert_and_point_lookups():
    db = SessionLocal()
    try:
        user_id = insert_user(db, make_user("ann@example.com"))

        assert count_by_email(db, "ann@example.com") == 1
        assert count_by_email(db, "bob@example.com") == 0
        assert find_by_email(db, "ann@example.com").user_id == user_id
        assert find_by_user_id(db, user_id).email == "ann@example.com"
        assert find_by_user_id(db, "missing") is None
    finally:
        db.close()


def test_insert_detects_duplicate_email_at_storage_layer():
    db = SessionLocal()
    try:
        insert_user(db, make_user("ann@example.com"))
        # simulates a second signup that passed the pre-check concurrently
        with pytest.raises(DuplicateEmailError):
            insert_user(db, make_user("ann@example.com"))
        assert count_by_email(db, "ann@example.com") == 1
    finally:
        db.close()


def test_list_page_on_empty_collection():
    db = SessionLocal()
    try:
        assert list_page(db, 0, 10) == (0, [])
    finally:
        db.close()


def test_list_page_slices_in_insertion_order():
    db = SessionLocal()
    try:
        emails = [f"user{i}@example.com" for i in range(5)]
        for email in emails:
            insert_user(db, make_user(email))

        total, page = list_page(db, 2, 2)
        assert total == 5
        assert [u.email for u in page] == emails[2:4]
    finally:
        db.close()


def test_new_user_id_shape():
    user_id = new_user_id()
    assert len(user_id) == 24
    int(user_id, 16)
