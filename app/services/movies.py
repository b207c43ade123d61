# app/services/movies.py
from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import StoreError, UniqueConstraintError, is_unique_violation
from app.models.movie import Movie
from app.schemas.movie import ImportReport, RowProblem
from app.services.movie_rows import classify_row, map_row


logger = logging.getLogger(__name__)


async def import_movies(
    session: AsyncSession,
    rows: Iterable[dict[str, Any]],
) -> ImportReport:
    """
    Вставляет строки таблицы по одной, каждую под своим SAVEPOINT.

    Дубликат по movie_name -> пропуск (duplicates), не ошибка.
    Любая другая ошибка строки -> failed, логируем и идём дальше.
    Уже вставленные строки не откатываются. Весь батч коммитится в конце;
    если не удалось закоммитить -> StoreError.
    """
    report = ImportReport()

    for idx, row in enumerate(rows, start=1):
        report.total += 1

        outcome = classify_row(map_row(row))
        if not outcome.accepted:
            report.rejected += 1
            report.problems.append(RowProblem(row=idx, reason=outcome.reason))
            logger.warning("Row %d rejected: %s", idx, outcome.reason)
            continue

        values = outcome.values
        logger.debug("Inserting: %s", values.get("movie_name"))
        try:
            async with session.begin_nested():
                await session.execute(insert(Movie).values(**values))
        except IntegrityError as e:
            if is_unique_violation(e):
                report.duplicates += 1
                report.problems.append(RowProblem(row=idx, reason="duplicate movie_name"))
                logger.info("Row %d skipped, duplicate movie: %r", idx, values.get("movie_name"))
            else:
                report.failed += 1
                report.problems.append(RowProblem(row=idx, reason=str(e.orig)))
                logger.warning("Row %d failed: %s", idx, e.orig)
            continue
        except SQLAlchemyError as e:
            report.failed += 1
            report.problems.append(RowProblem(row=idx, reason=str(e)))
            logger.warning("Row %d failed: %s", idx, e)
            continue
        except (OverflowError, ValueError, TypeError) as e:
            # драйвер не смог привязать значение; SQLAlchemy это не оборачивает
            report.failed += 1
            report.problems.append(RowProblem(row=idx, reason=f"{type(e).__name__}: {e}"))
            logger.warning("Row %d failed to bind: %s", idx, e)
            continue

        report.inserted += 1

    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Commit of movie import failed: %s", e)
        raise StoreError("Error inserting movies") from e

    logger.info(
        "Movie import done: total=%d inserted=%d duplicates=%d rejected=%d failed=%d",
        report.total, report.inserted, report.duplicates, report.rejected, report.failed,
    )
    return report


async def create_movie(session: AsyncSession, values: dict[str, Any]) -> int:
    movie = Movie(**values)
    session.add(movie)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        if is_unique_violation(e):
            raise UniqueConstraintError("Movie already exists") from e
        raise StoreError("Error adding movie") from e
    except SQLAlchemyError as e:
        await session.rollback()
        raise StoreError("Error adding movie") from e

    logger.info("Movie %r added with id=%d", movie.movie_name, movie.id)
    return movie.id


async def list_movies(session: AsyncSession) -> list[Movie]:
    try:
        rows = await session.execute(select(Movie).order_by(Movie.id))
    except SQLAlchemyError as e:
        raise StoreError("Error fetching movies") from e
    return list(rows.scalars().all())


async def count_movies(session: AsyncSession) -> int:
    return (await session.execute(select(func.count()).select_from(Movie))).scalar_one()


async def cleanup_duplicates(session: AsyncSession) -> int:
    """Оставляет по одной строке (с минимальным id) на каждое movie_name."""
    keep = select(func.min(Movie.id)).group_by(Movie.movie_name)
    try:
        result = await session.execute(
            delete(Movie)
            .where(Movie.id.not_in(keep))
            .execution_options(synchronize_session=False)
        )
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise StoreError("Error cleaning up duplicates") from e

    deleted = result.rowcount or 0
    logger.info("Cleanup removed %d duplicate movies", deleted)
    return deleted
