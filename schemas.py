# schemas.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class UserCreate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserProfile(BaseModel):
    username: str
    email: str

    class Config:
        from_attributes = True


class Identity(BaseModel):
    """Claims carried by a bearer token."""

    id: int
    email: str
    username: str


class Message(BaseModel):
    message: str


class LoginResponse(Message):
    token: str
    username: str


class ExpenseCreated(Message):
    insertId: int


class ExpenseIn(BaseModel):
    title: Optional[str] = None
    amount: Optional[float] = Field(default=None, allow_inf_nan=False)
    quantity: Optional[float] = Field(default=None, allow_inf_nan=False)


class ExpenseOut(BaseModel):
    id: int
    user_id: int
    title: str
    amount: float
    quantity: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True
