from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
from typing import Optional
from database import get_db
from errors import ValidationError, UserNotFound
from schemas import (
    ExpenseIn,
    ExpenseOut,
    ExpenseCreated,
    Identity,
    Message,
    UserProfile,
)
from auth import get_current_user
import crud


router = APIRouter()

# ids are stored as signed 64-bit integers
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1


def _require_expense_fields(expense: ExpenseIn):
    if not expense.title or expense.amount is None:
        raise ValidationError("Title and Amount are required")


@router.get("/user", response_model=UserProfile)
def get_user(
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_user),
):
    user = crud.get_user_by_id(db, current_user.id)
    if user is None:
        raise UserNotFound("User not found")
    return user


@router.post(
    "/add-expense",
    response_model=ExpenseCreated,
    status_code=status.HTTP_201_CREATED,
)
def add_expense(
    expense: ExpenseIn,
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_user),
):
    _require_expense_fields(expense)
    db_expense = crud.create_expense(
        db,
        user_id=current_user.id,
        title=expense.title,
        amount=expense.amount,
        quantity=expense.quantity,
    )
    return ExpenseCreated(
        message="Expense added successfully!",
        insertId=db_expense.id,
    )


@router.get("/expenses", response_model=list[ExpenseOut])
def get_expenses(
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_user),
):
    return crud.list_expenses(db, current_user.id)


# Update and delete answer 200 even when the id is not the caller's.
@router.put("/update-expense/{expense_id}", response_model=Message)
def update_expense(
    expense: ExpenseIn,
    expense_id: int = Path(..., ge=MIN_ID, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_user),
):
    _require_expense_fields(expense)
    crud.update_expense(
        db,
        expense_id,
        current_user.id,
        title=expense.title,
        amount=expense.amount,
        quantity=expense.quantity,
    )
    return Message(message="Expense updated successfully")


@router.delete("/delete-expense/{expense_id}", response_model=Message)
def delete_expense(
    expense_id: int = Path(..., ge=MIN_ID, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_user),
):
    crud.delete_expense(db, expense_id, current_user.id)
    return Message(message="Expense deleted successfully")


@router.get("/last-expense", response_model=Optional[ExpenseOut])
def get_last_expense(
    db: Session = Depends(get_db),
    current_user: Identity = Depends(get_current_user),
):
    return crud.most_recent_expense(db, current_user.id)
