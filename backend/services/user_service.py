"""
User service — the account surface articles depend on.

Password hashing and authentication belong to the auth subsystem; the
password is stored exactly as handed in.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from db_models import User
from domain.errors import NotFoundError
from models import UserCreate
from services import persistence

logger = logging.getLogger(__name__)


async def create_user(
    db: AsyncSession,
    *,
    first_name: str,
    last_name: str,
    email: str,
    username: str,
    password: str,
    display_name: str | None = None,
    provider: str = "local",
) -> User:
    """
    Build and save a user.

    display_name falls back to "<first> <last>". A duplicate username is a
    storage-level constraint violation and surfaces as StoreError.
    """
    if display_name is None:
        display_name = f"{first_name} {last_name}".strip()

    user = User(
        first_name=first_name,
        last_name=last_name,
        display_name=display_name,
        email=email,
        username=username,
        password=password,
        provider=provider,
    )
    await save_user(db, user)
    logger.info(f"Created user {user.username} (id={user.id})")
    return user


async def save_user(db: AsyncSession, user: User) -> User:
    return await persistence.save(db, user)


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    return await persistence.get(db, User, user_id)


async def require_user(db: AsyncSession, user_id: int) -> User:
    user = await get_user(db, user_id)
    if user is None:
        raise NotFoundError("User", str(user_id))
    return user


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    return await persistence.find_one(db, User, User.username == username.strip())


async def user_exists(db: AsyncSession, user_id: int) -> bool:
    return await persistence.count(db, User, User.id == user_id) > 0


async def count_users(db: AsyncSession) -> int:
    return await persistence.count(db, User)


async def remove_user(db: AsyncSession, user: User) -> None:
    await persistence.remove(db, user)


async def remove_all_users(db: AsyncSession) -> int:
    """Bulk-remove every user. Articles pointing at them are left alone."""
    return await persistence.bulk_remove(db, User)


async def register_user(db: AsyncSession, payload: UserCreate) -> User:
    """Create a user from an inbound UserCreate payload."""
    return await create_user(db, **payload.model_dump())
