from sqlalchemy.orm import DeclarativeBase


# INTEGER в SQLite и BIGINT в Postgres: 64 бита со знаком
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class Base(DeclarativeBase):
    pass
