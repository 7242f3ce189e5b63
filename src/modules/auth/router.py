"""Auth router - API endpoints."""

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.core.database import get_database
from src.core.exceptions import UnauthorizedError
from src.modules.auth.dependencies import get_current_user
from src.modules.auth.models import UserInDB
from src.modules.auth.schemas import (
    LoginResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from src.modules.auth.security import create_access_token
from src.modules.auth.services import authenticate_user, create_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


def to_user_response(user: UserInDB) -> UserResponse:
    return UserResponse(
        id=user.user_id,
        username=user.username,
        email=user.email,
        first_name=user.properties.get("FirstName"),
        last_name=user.properties.get("LastName"),
        phone=user.phone,
        roles=user.roles,
    )


@router.post(
    "/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    user_data: UserCreate,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> UserResponse:
    """Register a new user with the default role."""
    user = await create_user(db, user_data)
    return to_user_response(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> LoginResponse:
    """Login with username or email and get an access token."""
    user = await authenticate_user(
        db, credentials.username_or_email, credentials.password
    )
    if not user:
        raise UnauthorizedError("Incorrect username, email or password")

    access_token = create_access_token(subject=user.user_id, roles=user.roles)
    return LoginResponse(access_token=access_token, user=to_user_response(user))


@router.get("/login", response_model=UserResponse)
async def get_me(
    current_user: UserInDB = Depends(get_current_user),
) -> UserResponse:
    """Get current authenticated user."""
    return to_user_response(current_user)


@router.delete("/login")
async def logout():
    """Tokens are stateless; the client drops its token."""
    return {"message": "Logged out"}
