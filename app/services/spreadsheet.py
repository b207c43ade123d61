"""Чтение загруженной таблицы в список строк (header -> value).

Читаем только первый лист, по позиции. Заголовки берём как есть: без
trim и без приведения регистра. Пустые ячейки в строку не попадают, чтобы
дальше сработали дефолты для отсутствующих полей.
"""
from __future__ import annotations

import csv
import io
import logging
from typing import Any, Iterable, Optional

from openpyxl import load_workbook

from app.core.errors import EmptyInputError, SpreadsheetDecodeError


logger = logging.getLogger(__name__)

ZIP_MAGIC = b"PK\x03\x04"
EXCEL_SUFFIXES = (".xlsx", ".xlsm", ".xltx", ".xltm")


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _rows_to_records(rows: Iterable[Iterable[Any]]) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    headers: Optional[list[Optional[str]]] = None

    for raw in rows:
        values = list(raw)
        if all(_is_empty(v) for v in values):
            continue

        if headers is None:
            headers = [None if _is_empty(h) else (h if isinstance(h, str) else str(h)) for h in values]
            continue

        record: dict[str, Any] = {}
        for header, value in zip(headers, values):
            if header is None or _is_empty(value):
                continue
            record[header] = value

        if record:
            records.append(record)

    return records


def _read_xlsx(content: bytes) -> list[dict[str, Any]]:
    try:
        wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise SpreadsheetDecodeError(f"Could not read Excel file: {e}") from e

    try:
        if not wb.worksheets:
            return []
        ws = wb.worksheets[0]
        logger.debug("Reading sheet %r", ws.title)
        return _rows_to_records(ws.iter_rows(values_only=True))
    finally:
        wb.close()


def _read_csv(content: bytes) -> list[dict[str, Any]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SpreadsheetDecodeError("Could not read CSV file: not UTF-8") from e

    try:
        reader = csv.reader(io.StringIO(text))
        return _rows_to_records(reader)
    except csv.Error as e:
        raise SpreadsheetDecodeError(f"Could not read CSV file: {e}") from e


def read_spreadsheet(content: bytes, filename: Optional[str] = None) -> list[dict[str, Any]]:
    """Декодирует xlsx (или csv) и возвращает строки первого листа.

    EmptyInputError, если не получилось ни одной строки данных.
    SpreadsheetDecodeError, если файл не читается вообще.
    """
    name = (filename or "").lower()
    if name.endswith(".csv"):
        records = _read_csv(content)
    elif content.startswith(ZIP_MAGIC) or name.endswith(EXCEL_SUFFIXES):
        records = _read_xlsx(content)
    else:
        records = _read_csv(content)

    logger.info("Parsed %d rows from %s", len(records), filename or "upload")

    if not records:
        raise EmptyInputError("Excel file is empty or headers are incorrect")
    return records
