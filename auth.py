from fastapi import APIRouter, Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from typing import Optional
import logging
import bcrypt
import jwt
from config import settings
from database import get_db, User
from errors import (
    ValidationError,
    AlreadyExists,
    NotFound,
    InvalidCredentials,
    Unauthenticated,
)
from schemas import UserCreate, UserLogin, Identity, Message, LoginResponse
import crud

logger = logging.getLogger(__name__)

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
BCRYPT_MAX_BYTES = 72

auth_router = APIRouter()
token_header = APIKeyHeader(name="Authorization", auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    ).decode()


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: Optional[str]) -> Identity:
    """Decode a bearer token into the identity it was issued for.

    Missing, malformed, expired or badly signed tokens all raise
    ``Unauthenticated``; nothing is looked up in the store.
    """
    if not token:
        raise Unauthenticated("Unauthorized - No Token Provided")
    try:
        payload = jwt.decode(
            token, SECRET_KEY, algorithms=[ALGORITHM], options={"require": ["exp"]}
        )
        return Identity(
            id=payload["id"], email=payload["email"], username=payload["username"]
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise Unauthenticated()
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        raise Unauthenticated()


async def get_current_user(
    authorization: Optional[str] = Depends(token_header),
) -> Identity:
    if authorization is None:
        raise Unauthenticated("Unauthorized - No Token Provided")
    token = authorization.strip()
    if token.startswith("Bearer "):
        token = token[len("Bearer "):].strip()
    if not token:
        raise Unauthenticated("Invalid token")
    return verify_token(token)


def register(db: Session, username: str, email: str, password: str) -> User:
    if not username or not email or not password:
        raise ValidationError("All fields are required")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError("Password must be at most 72 bytes")

    if crud.get_user_by_email(db, email):
        logger.warning("Registration rejected, %s already exists", email)
        raise AlreadyExists("User already exists")

    user = crud.create_user(db, username, email, hash_password(password))
    logger.info("Registered %s", email)
    return user


def login(db: Session, email: str, password: str) -> tuple[User, str]:
    if not email or not password:
        raise ValidationError("All fields are required")

    user = crud.get_user_by_email(db, email)
    if user is None:
        logger.info("Login failed, no user for %s", email)
        raise NotFound("User not found")
    if not verify_password(password, user.password):
        logger.info("Login failed, wrong password for %s", email)
        raise InvalidCredentials("Invalid credentials")

    logger.info("User %s logged in", user.id)
    return user, create_access_token(user)


@auth_router.post("/register", response_model=Message)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    register(db, user.username, user.email, user.password)
    return Message(message="Registration successful!")


@auth_router.post("/login", response_model=LoginResponse)
def login_user(user: UserLogin, db: Session = Depends(get_db)):
    db_user, token = login(db, user.email, user.password)
    return LoginResponse(
        message="Login successful", token=token, username=db_user.username
    )
