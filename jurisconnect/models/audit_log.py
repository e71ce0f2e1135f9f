"""
Modelo AuditLog — historial INMUTABLE de una demanda.
INSERT-only, sin UPDATE/DELETE.
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from jurisconnect.database import Base
from jurisconnect.models.principal import PrincipalRole


class AuditAction(str, enum.Enum):
    CREATION = "creation"
    UPDATE = "update"
    STATUS_CHANGE = "status_change"
    ASSIGNMENT = "assignment"
    ATTACHMENT_UPLOAD = "attachment_upload"


class AuditLog(Base):
    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    demanda_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("demandas.id"), nullable=False, index=True
    )

    # ── Actor ────────────────────────────────────────
    actor_id: Mapped[int] = mapped_column(Integer, nullable=False)
    actor_role: Mapped[PrincipalRole] = mapped_column(
        Enum(PrincipalRole), nullable=False
    )

    # ── Evento ───────────────────────────────────────
    action: Mapped[AuditAction] = mapped_column(
        Enum(AuditAction), nullable=False, index=True
    )
    details: Mapped[dict | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        comment="Detalle estructurado de la acción",
    )

    # ── Timestamp inmutable ──────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.action.value} on demanda {self.demanda_id}>"
