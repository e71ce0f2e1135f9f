"""
Modelo Demanda — solicitud de diligencia enviada por un cliente.

Estados:
    pending → in_progress (al asignar un corresponsal)
    cualquier estado → cualquier estado vía cambio de estado explícito

El grafo de transiciones NO se valida: un actor autorizado puede fijar
cualquier valor del enum en cualquier orden.
"""

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from jurisconnect.database import Base


class DemandaStatus(str, enum.Enum):
    """Estados de una demanda."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"


INITIAL_STATUS = DemandaStatus.PENDING


class Demanda(Base):
    __tablename__ = "demandas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Partes ───────────────────────────────────────
    client_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("clients.id"), nullable=False
    )
    correspondent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("correspondents.id"), nullable=True
    )

    # ── Datos de la demanda ──────────────────────────
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    process_number: Mapped[str | None] = mapped_column(
        String(50), comment="Número del proceso judicial"
    )
    category: Mapped[str | None] = mapped_column(
        String(100), comment="Tipo de diligencia: audiencia, protocolo, cópia, etc."
    )
    deadline: Mapped[date | None] = mapped_column(Date, comment="Prazo fatal")
    proposed_value: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    status: Mapped[DemandaStatus] = mapped_column(
        Enum(DemandaStatus),
        nullable=False,
        default=INITIAL_STATUS,
    )

    # ── Timestamps ───────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # ── Relaciones ───────────────────────────────────
    client: Mapped["Client"] = relationship("Client")  # noqa: F821
    correspondent: Mapped["Correspondent"] = relationship("Correspondent")  # noqa: F821

    __table_args__ = (
        Index("idx_demanda_client", "client_id", "created_at"),
        Index("idx_demanda_correspondent", "correspondent_id", "created_at"),
        Index("idx_demanda_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Demanda {self.id} [{self.status.value}] {self.title}>"
