"""
pollution/repository.py

SQLAlchemy model and repository for per-category heavy-metal standard
overrides. No index math lives here.

Base is imported from db.base (the project-wide shared declarative base).
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, Float, String, Text, UniqueConstraint, select, true
from sqlalchemy.orm import Mapped, Session, mapped_column

from db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

class HeavyMetalStandard(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Stored override of a built-in standard for one metal and category.

    Only the permissible limit, ideal value and weightage may be overridden;
    auxiliary values (background, toxic response, reference dose) always come
    from the built-in tables.
    """

    __tablename__ = "heavy_metal_standards"

    __table_args__ = (
        UniqueConstraint("metal", "category", name="uq_hms_metal_category"),
    )

    metal: Mapped[str] = mapped_column(String(8), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(16), nullable=False, default="BIS")
    permissible_limit: Mapped[float] = mapped_column(Float, nullable=False)
    ideal_value: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    weightage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    unit: Mapped[str] = mapped_column(String(16), nullable=False, default="mg/L")
    source: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class StandardsRepository:
    """Data access for HeavyMetalStandard rows.

    Methods operate inside the caller's transaction; nothing is committed here.
    """

    def list_active(self, session: Session, category: str) -> list[HeavyMetalStandard]:
        stmt = (
            select(HeavyMetalStandard)
            .where(HeavyMetalStandard.category == category.strip().upper())
            .where(HeavyMetalStandard.is_active == true())
            .order_by(HeavyMetalStandard.metal)
        )
        return list(session.scalars(stmt).all())

    def load_overrides(self, session: Session, category: str) -> dict[str, dict[str, float | None]]:
        """Return ``symbol -> {permissible_limit, ideal_value, weightage}``."""
        return {
            row.metal.strip().upper(): {
                "permissible_limit": row.permissible_limit,
                "ideal_value": row.ideal_value,
                "weightage": row.weightage,
            }
            for row in self.list_active(session, category)
        }

    def upsert(
        self,
        session: Session,
        *,
        metal: str,
        category: str,
        permissible_limit: float,
        ideal_value: float = 0.0,
        weightage: Optional[float] = None,
        source: Optional[str] = None,
        description: Optional[str] = None,
    ) -> HeavyMetalStandard:
        metal_key = metal.strip().upper()
        category_key = category.strip().upper()
        stmt = select(HeavyMetalStandard).where(
            HeavyMetalStandard.metal == metal_key,
            HeavyMetalStandard.category == category_key,
        )
        record = session.scalars(stmt).first()
        if record is None:
            record = HeavyMetalStandard(metal=metal_key, category=category_key)
            session.add(record)
        record.permissible_limit = permissible_limit
        record.ideal_value = ideal_value
        record.weightage = weightage
        record.source = source
        record.description = description
        record.is_active = True
        session.flush()
        return record
