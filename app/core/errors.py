from sqlalchemy.exc import IntegrityError


class MovieStoreError(Exception):
    """Базовая ошибка сервиса; сообщение можно отдавать клиенту как есть."""
    pass


class EmptyInputError(MovieStoreError):
    """Из таблицы не получилось ни одной строки."""
    pass


class SpreadsheetDecodeError(MovieStoreError):
    pass


class UniqueConstraintError(MovieStoreError):
    pass


class StoreError(MovieStoreError):
    pass


class ValidationError(MovieStoreError):
    pass


def is_unique_violation(exc: IntegrityError) -> bool:
    """UNIQUE-нарушение или что-то другое (NOT NULL, FK, ...).

    SQLite: "UNIQUE constraint failed: movies.movie_name"
    Postgres: SQLSTATE 23505
    """
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == "23505":
        return True
    return "UNIQUE constraint failed" in str(orig if orig is not None else exc)
