# src/sheworks/models/admin.py
"""Marketplace administrators."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from sheworks.db.ids import new_id
from sheworks.db.session import Base
from sheworks.db.time import utcnow


class Admin(Base):
    """Operator account with access to the moderation panel."""

    __tablename__ = "admin"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="Administrator")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    kind = "admin"

    @property
    def display_name(self) -> str:
        return self.name
