from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator

from app.models.base import INT64_MAX, INT64_MIN


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    score: int = Field(0, ge=INT64_MIN, le=INT64_MAX)


class UserCreated(BaseModel):
    userId: int


class ScoreUpdate(BaseModel):
    # только числа из JSON: "10" и true не принимаем, 10.0 -> 10
    userId: Annotated[StrictInt, Field(ge=INT64_MIN, le=INT64_MAX)]
    score: Union[StrictInt, StrictFloat]

    @field_validator("score")
    @classmethod
    def _whole_score(cls, v: Union[int, float]) -> int:
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError("score must be a whole number")
            v = int(v)
        if not INT64_MIN <= v <= INT64_MAX:
            raise ValueError("score is out of range")
        return v


class LeaderboardRow(BaseModel):
    id: int
    username: str
    score: int
    rank: int

    model_config = ConfigDict(from_attributes=True)
