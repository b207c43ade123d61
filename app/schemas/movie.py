from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.base import INT64_MAX, INT64_MIN


class MovieCreate(BaseModel):
    movie_name: Optional[str] = None
    release_year: Optional[int] = Field(None, ge=INT64_MIN, le=INT64_MAX)
    genre: Optional[str] = None
    actor: Optional[str] = None
    actress: Optional[str] = None
    # дефолт только если поля нет вообще; явный null остаётся null
    side_actor: Optional[str] = ""
    side_actress: Optional[str] = ""
    song_name: Optional[str] = None
    movie_letter: Optional[str] = None
    song_letter: Optional[str] = None
    actor_letter: Optional[str] = None
    actress_letter: Optional[str] = None


class MovieRead(MovieCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class RowProblem(BaseModel):
    row: int
    reason: str


class ImportReport(BaseModel):
    total: int = 0
    inserted: int = 0
    duplicates: int = 0
    rejected: int = 0
    failed: int = 0
    problems: list[RowProblem] = []


class ImportResult(ImportReport):
    message: str
