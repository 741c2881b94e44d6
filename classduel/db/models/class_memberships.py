from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from classduel.db.models.base import Base


class ClassMembership(Base):
    __tablename__ = "class_memberships"
    __table_args__ = (
        CheckConstraint(
            "role_in_class IN ('student','teacher')",
            name="ck_class_memberships_role",
        ),
        UniqueConstraint("class_id", "user_id", name="uq_class_memberships_class_user"),
        Index("idx_class_memberships_user", "user_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    class_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("classes.id"), nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    role_in_class: Mapped[str] = mapped_column(String(16), nullable=False)
    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
