import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_session
from app.core.errors import StoreError, UniqueConstraintError, ValidationError
from app.schemas.user import LeaderboardRow, ScoreUpdate, UserCreate, UserCreated
from app.services.leaderboard import create_user, top_users, update_score


logger = logging.getLogger(__name__)

router = APIRouter(tags=["leaderboard"])


def _parse_score_update(raw: bytes) -> ScoreUpdate:
    try:
        return ScoreUpdate.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ValidationError("userId and numeric score are required") from e


@router.get("/leaderboard", response_model=list[LeaderboardRow])
async def get_leaderboard(session: AsyncSession = Depends(get_session)):
    try:
        return await top_users(session, limit=settings.LEADERBOARD_SIZE)
    except StoreError as e:
        logger.error("Error fetching leaderboard: %s", e.__cause__)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/create-user", response_model=UserCreated)
async def post_create_user(body: UserCreate, session: AsyncSession = Depends(get_session)):
    try:
        user_id = await create_user(
            session, body.username, body.score, policy=settings.USER_CREATE_POLICY
        )
    except UniqueConstraintError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.error("Error creating user: %s", e.__cause__)
        raise HTTPException(status_code=500, detail=str(e))

    return UserCreated(userId=user_id)


@router.post("/update-score", response_class=PlainTextResponse)
async def post_update_score(
    request: Request,
    session: AsyncSession = Depends(get_session),
):
    # тело читаем сами: битый JSON тоже должен давать 400, а не 422
    try:
        body = _parse_score_update(await request.body())
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        updated = await update_score(session, body.userId, body.score)
    except StoreError as e:
        logger.error("Error updating score: %s", e.__cause__)
        raise HTTPException(status_code=500, detail=str(e))

    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return "Score updated successfully"
