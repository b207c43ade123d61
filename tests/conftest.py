"""Shared fixtures.

Every test gets its own SQLite file under tmp_path. NullPool keeps
aiosqlite connections from leaking between the event loops used by
pytest-asyncio and by TestClient.
"""

from __future__ import annotations

import io
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from openpyxl import Workbook
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.pool import NullPool

from app.core.db import configure_engine, dispose_engine, init_models
from app.main import app
from app.services.movie_rows import MOVIE_FIELDS


# ---------------------------------------------------------------------------
# Spreadsheet builders
# ---------------------------------------------------------------------------

def build_xlsx(rows: list[dict], headers: tuple[str, ...] | list[str] = MOVIE_FIELDS, extra_sheets=None) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Movies"
    ws.append(list(headers))
    for row in rows:
        ws.append([row.get(h) for h in headers])
    for title, sheet_rows in (extra_sheets or {}).items():
        other = wb.create_sheet(title)
        for sheet_row in sheet_rows:
            other.append(sheet_row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def movie(name: str, year=2001, **overrides) -> dict:
    row = {
        "movie_name": name,
        "release_year": year,
        "genre": "Drama",
        "actor": "Actor " + name,
        "actress": "Actress " + name,
        "song_name": "Song " + name,
        "movie_letter": name[:1],
        "song_letter": "S",
        "actor_letter": "A",
        "actress_letter": "A",
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_xlsx():
    return build_xlsx


@pytest.fixture
def make_movie():
    return movie


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'movies.db'}"


@pytest_asyncio.fixture
async def engine(db_url):
    engine = configure_engine(db_url, poolclass=NullPool)
    await init_models()
    yield engine
    await dispose_engine()


@pytest_asyncio.fixture
async def session(engine):
    async with async_sessionmaker(engine, expire_on_commit=False, autoflush=False)() as s:
        yield s


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
def client(db_url):
    configure_engine(db_url, poolclass=NullPool)
    with TestClient(app) as c:
        yield c
