from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from app.models.base import INT64_MAX, INT64_MIN


MOVIE_FIELDS: tuple[str, ...] = (
    "movie_name",
    "release_year",
    "genre",
    "actor",
    "actress",
    "side_actor",
    "side_actress",
    "song_name",
    "movie_letter",
    "song_letter",
    "actor_letter",
    "actress_letter",
)

# подставляются только если ключа нет совсем
MISSING_DEFAULTS: dict[str, Any] = {
    "side_actor": "",
    "side_actress": "",
}

INTEGER_FIELDS = frozenset({"release_year"})


@dataclass
class RowOutcome:
    values: Optional[dict[str, Any]] = None
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.reason is None


def map_row(row: dict[str, Any]) -> dict[str, Any]:
    """Проецирует строку таблицы на колонки movies. Никаких приведений типов."""
    return {
        field: row[field] if field in row else MISSING_DEFAULTS.get(field)
        for field in MOVIE_FIELDS
    }


def _to_int(value: Any) -> int:
    number = _parse_int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError(value)
    return number


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(value)
        return int(value)
    if isinstance(value, str):
        s = value.strip()
        if s.lstrip("-").isdigit():
            return int(s)
    raise ValueError(value)


def classify_row(mapped: dict[str, Any]) -> RowOutcome:
    """Принимаем строку (с мягким приведением) или отклоняем с причиной."""
    values: dict[str, Any] = {}
    for field, value in mapped.items():
        if value is None:
            values[field] = None
        elif field in INTEGER_FIELDS:
            try:
                values[field] = _to_int(value)
            except ValueError:
                return RowOutcome(reason=f"{field} is not a 64-bit integer: {value!r}")
        elif isinstance(value, str):
            values[field] = value
        else:
            # числа/даты из ячеек в текстовые колонки
            values[field] = str(value)
    return RowOutcome(values=values)
