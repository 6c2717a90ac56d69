import pytest
from sqlalchemy.exc import OperationalError

import crud
from database import Base
from errors import AlreadyExists, StoreFailure


@pytest.fixture
def owners(db):
    alice = crud.create_user(db, "alice", "alice@example.com", "hash-a")
    bob = crud.create_user(db, "bob", "bob@example.com", "hash-b")
    return alice, bob


def test_email_uniqueness_enforced_by_store(db, owners) -> None:
    with pytest.raises(AlreadyExists):
        crud.create_user(db, "alice2", "alice@example.com", "hash")
    # session is usable again after the rollback
    assert crud.get_user_by_email(db, "bob@example.com").username == "bob"


def test_user_lookup(db, owners) -> None:
    alice, _ = owners
    assert crud.get_user_by_id(db, alice.id).email == "alice@example.com"
    assert crud.get_user_by_email(db, "nobody@example.com") is None
    assert crud.get_user_by_id(db, 12345) is None


def test_most_recent_and_listing(db, owners) -> None:
    alice, bob = owners
    assert crud.most_recent_expense(db, alice.id) is None
    assert crud.list_expenses(db, alice.id) == []

    first = crud.create_expense(db, alice.id, "Rent", 900)
    coffee = crud.create_expense(db, alice.id, "Coffee", 4.5)
    crud.create_expense(db, bob.id, "Books", 30, quantity=3)

    latest = crud.most_recent_expense(db, alice.id)
    assert latest.id == coffee.id
    assert (latest.title, latest.amount, latest.quantity) == ("Coffee", 4.5, None)
    assert latest.created_at is not None
    assert [e.id for e in crud.list_expenses(db, alice.id)] == [coffee.id, first.id]


def test_update_and_delete_filter_by_owner(db, owners) -> None:
    alice, bob = owners
    expense = crud.create_expense(db, alice.id, "Coffee", 4.5)

    assert crud.update_expense(db, expense.id, bob.id, "Tea", 1, None) == 0
    assert crud.delete_expense(db, expense.id, bob.id) == 0
    db.refresh(expense)
    assert expense.title == "Coffee"

    assert crud.update_expense(db, expense.id, alice.id, "Tea", 2, 1) == 1
    db.refresh(expense)
    assert (expense.title, expense.amount, expense.quantity) == ("Tea", 2, 1)

    assert crud.delete_expense(db, expense.id, alice.id) == 1
    assert crud.delete_expense(db, expense.id, alice.id) == 0


def test_database_errors_become_store_failure(db, owners, engine) -> None:
    alice, _ = owners
    Base.metadata.tables["expenses"].drop(engine)
    with pytest.raises(StoreFailure) as excinfo:
        crud.list_expenses(db, alice.id)
    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert excinfo.value.message == "Database error"
