# crud.py
import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import User, Expense
from errors import AlreadyExists, StoreFailure

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(db: Session, action: str):
    """Roll back and report any database error as a single StoreFailure."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error while trying to %s: %s", action, exc)
        raise StoreFailure() from exc


# Credential store


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    with store_errors(db, "fetch user by email"):
        return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    with store_errors(db, "fetch user by id"):
        return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, username: str, email: str, password_hash: str) -> User:
    user = User(username=username, email=email, password=password_hash)
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        # unique email lost a race with a concurrent registration
        db.rollback()
        logger.warning("Duplicate registration rejected by store for %s", email)
        raise AlreadyExists() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error while trying to create user: %s", exc)
        raise StoreFailure() from exc
    logger.info("Created user %s", user.id)
    return user


# Expense store


def create_expense(
    db: Session,
    user_id: int,
    title: str,
    amount: float,
    quantity: Optional[float] = None,
) -> Expense:
    expense = Expense(user_id=user_id, title=title, amount=amount, quantity=quantity)
    with store_errors(db, "create expense"):
        db.add(expense)
        db.commit()
        db.refresh(expense)
    logger.info("User %s added expense %s", user_id, expense.id)
    return expense


def list_expenses(db: Session, user_id: int) -> list[Expense]:
    with store_errors(db, "list expenses"):
        return (
            db.query(Expense)
            .filter(Expense.user_id == user_id)
            .order_by(Expense.created_at.desc(), Expense.id.desc())
            .all()
        )


def update_expense(
    db: Session,
    expense_id: int,
    user_id: int,
    title: str,
    amount: float,
    quantity: Optional[float],
) -> int:
    """Returns the number of rows changed; 0 when the caller does not own it."""
    with store_errors(db, "update expense"):
        updated = (
            db.query(Expense)
            .filter(Expense.id == expense_id, Expense.user_id == user_id)
            .update(
                {"title": title, "amount": amount, "quantity": quantity},
                synchronize_session=False,
            )
        )
        db.commit()
    logger.info("User %s updated expense %s (%d rows)", user_id, expense_id, updated)
    return updated


def delete_expense(db: Session, expense_id: int, user_id: int) -> int:
    with store_errors(db, "delete expense"):
        deleted = (
            db.query(Expense)
            .filter(Expense.id == expense_id, Expense.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    logger.info("User %s deleted expense %s (%d rows)", user_id, expense_id, deleted)
    return deleted


def most_recent_expense(db: Session, user_id: int) -> Optional[Expense]:
    with store_errors(db, "fetch last expense"):
        return (
            db.query(Expense)
            .filter(Expense.user_id == user_id)
            .order_by(Expense.created_at.desc(), Expense.id.desc())
            .first()
        )
