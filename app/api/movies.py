import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.core.errors import (
    EmptyInputError,
    SpreadsheetDecodeError,
    StoreError,
    UniqueConstraintError,
)
from app.schemas.movie import ImportResult, MovieCreate, MovieRead
from app.services.movies import cleanup_duplicates, create_movie, import_movies, list_movies
from app.services.spreadsheet import read_spreadsheet


logger = logging.getLogger(__name__)

router = APIRouter(tags=["movies"])


@router.post("/upload-movies", response_model=ImportResult)
async def upload_movies(
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_session),
):
    content = await file.read()

    try:
        # openpyxl синхронный, не держим event loop
        rows = await run_in_threadpool(read_spreadsheet, content, file.filename)
    except EmptyInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SpreadsheetDecodeError as e:
        logger.error("Upload error: %s", e)
        raise HTTPException(status_code=500, detail="Error processing file")

    try:
        report = await import_movies(session, rows)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ImportResult(message="Movies uploaded successfully!", **report.model_dump())


@router.get("/movies", response_model=list[MovieRead])
async def get_movies(session: AsyncSession = Depends(get_session)):
    try:
        return await list_movies(session)
    except StoreError as e:
        logger.error("Error fetching movies: %s", e.__cause__)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/movies", response_class=PlainTextResponse, status_code=status.HTTP_201_CREATED)
async def add_movie(body: MovieCreate, session: AsyncSession = Depends(get_session)):
    try:
        movie_id = await create_movie(session, body.model_dump())
    except UniqueConstraintError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StoreError as e:
        logger.error("Error inserting data: %s", e.__cause__)
        raise HTTPException(status_code=500, detail=str(e))

    return f"Movie added with ID: {movie_id}"


@router.delete("/cleanup-duplicates", response_class=PlainTextResponse)
async def delete_duplicates(session: AsyncSession = Depends(get_session)):
    try:
        deleted = await cleanup_duplicates(session)
    except StoreError as e:
        logger.error("Cleanup failed: %s", e.__cause__)
        raise HTTPException(status_code=500, detail=str(e))

    return f"Deleted {deleted} duplicate movies"
