from __future__ import annotations

import logging
from typing import Literal

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import StoreError, UniqueConstraintError, is_unique_violation
from app.models.user import User
from app.schemas.user import LeaderboardRow


logger = logging.getLogger(__name__)

CreatePolicy = Literal["idempotent", "strict"]


async def _find_user_id(session: AsyncSession, username: str) -> int | None:
    return await session.scalar(select(User.id).where(User.username == username))


async def _insert_user(session: AsyncSession, username: str, score: int) -> int:
    user = User(username=username, score=score)
    session.add(user)
    await session.commit()
    return user.id


async def create_user(
    session: AsyncSession,
    username: str,
    score: int = 0,
    *,
    policy: CreatePolicy = "idempotent",
) -> int:
    """
    Lookup-or-create по username.

    idempotent: существующий пользователь -> его id (score не трогаем).
    strict: существующий пользователь -> UniqueConstraintError.
    """
    try:
        if policy == "idempotent":
            existing = await _find_user_id(session, username)
            if existing is not None:
                return existing
        user_id = await _insert_user(session, username, score)
    except IntegrityError as e:
        await session.rollback()
        if not is_unique_violation(e):
            raise StoreError("Error creating user") from e
        if policy == "strict":
            raise UniqueConstraintError(f"User {username!r} already exists") from e
        # кто-то успел вставить между SELECT и INSERT
        existing = await _find_user_id(session, username)
        if existing is None:
            raise StoreError("Error creating user") from e
        return existing
    except SQLAlchemyError as e:
        await session.rollback()
        raise StoreError("Error creating user") from e

    logger.info("User %r created with id=%d", username, user_id)
    return user_id


async def update_score(session: AsyncSession, user_id: int, score: int) -> bool:
    """Перезаписывает score (не прибавляет). False, если такого id нет."""
    try:
        result = await session.execute(
            update(User).where(User.id == user_id).values(score=score)
        )
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise StoreError("Error updating score") from e

    updated = (result.rowcount or 0) > 0
    if updated:
        logger.info("User %d score set to %d", user_id, score)
    return updated


async def top_users(session: AsyncSession, limit: int = 10) -> list[LeaderboardRow]:
    """Топ по score; ранг считается по всей таблице, до LIMIT."""
    rank = func.dense_rank().over(order_by=User.score.desc()).label("rank")
    stmt = (
        select(User.id, User.username, User.score, rank)
        .order_by(User.score.desc(), User.id)
        .limit(limit)
    )
    try:
        rows = (await session.execute(stmt)).all()
    except SQLAlchemyError as e:
        raise StoreError("Error fetching leaderboard") from e
    return [LeaderboardRow.model_validate(r) for r in rows]
