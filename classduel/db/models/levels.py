from __future__ import annotations

from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from classduel.db.models.base import Base


class Level(Base):
    __tablename__ = "levels"
    __table_args__ = (
        CheckConstraint("level_number >= 1", name="ck_levels_level_number_positive"),
        Index("idx_levels_topic_number", "topic_id", "level_number"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    topic_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("topics.id"), nullable=False)
    level_number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str | None] = mapped_column(String(128), nullable=True)
    min_xp_unlock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    study_text: Mapped[str | None] = mapped_column(Text, nullable=True)
