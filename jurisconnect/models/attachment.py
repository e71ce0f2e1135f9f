"""
Modelo Attachment — metadatos de un archivo adjunto a una demanda.
El archivo en sí vive en disco (`UPLOAD_DIR`).
"""

from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from jurisconnect.database import Base
from jurisconnect.models.principal import PrincipalRole


class Attachment(Base):
    __tablename__ = "attachments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    demanda_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("demandas.id"), nullable=False, index=True
    )

    # ── Quién subió el archivo ───────────────────────
    uploader_id: Mapped[int] = mapped_column(Integer, nullable=False)
    uploader_role: Mapped[PrincipalRole] = mapped_column(
        Enum(PrincipalRole), nullable=False
    )

    # ── Archivo ──────────────────────────────────────
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(500), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(150), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Attachment {self.original_name} demanda={self.demanda_id}>"
