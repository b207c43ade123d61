from typing import Optional

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Movie(Base):
    __tablename__ = "movies"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    movie_name: Mapped[Optional[str]] = mapped_column(Text, unique=True, nullable=True)
    release_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    genre: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    actor: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    actress: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    side_actor: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")
    side_actress: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default="")

    song_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # первые буквы для игры "на букву ..."
    movie_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    song_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    actor_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    actress_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
