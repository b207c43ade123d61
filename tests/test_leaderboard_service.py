"""Persistence tests for app.services.leaderboard."""

import pytest
from sqlalchemy import func, select

from app.core.errors import UniqueConstraintError
from app.models.user import User
from app.services.leaderboard import create_user, top_users, update_score


class TestCreateUser:
    async def test_idempotent(self, session):
        first = await create_user(session, "neo", 3)
        second = await create_user(session, "neo", 99)
        assert first == second
        assert await session.scalar(select(func.count()).select_from(User)) == 1

    async def test_strict(self, session):
        await create_user(session, "neo", policy="strict")
        with pytest.raises(UniqueConstraintError):
            await create_user(session, "neo", policy="strict")
        assert await session.scalar(select(func.count()).select_from(User)) == 1


class TestUpdateScore:
    async def test_overwrite_not_increment(self, session):
        user_id = await create_user(session, "neo", 10)
        assert await update_score(session, user_id, 4) is True
        assert await session.scalar(select(User.score).where(User.id == user_id)) == 4

    async def test_missing_user(self, session):
        assert await update_score(session, 42, 4) is False


class TestTopUsers:
    async def test_rank_over_whole_table(self, session):
        for i, score in enumerate([50, 40, 40, 30]):
            await create_user(session, f"u{i}", score)

        rows = await top_users(session, limit=2)
        assert [(r.username, r.rank) for r in rows] == [("u0", 1), ("u1", 2)]

        rows = await top_users(session, limit=10)
        assert [r.rank for r in rows] == [1, 2, 2, 3]
