"""
Principales del sistema: administradores, clientes y corresponsales.

Cada tipo vive en su propia tabla con su propio índice único de email,
por lo que un mismo email puede existir en más de una tabla. El login
resuelve esa colisión con un orden fijo de búsqueda (ver
`jurisconnect.services.auth_service.LOOKUP_ORDER`).
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Enum, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from jurisconnect.database import Base


class PrincipalRole(str, enum.Enum):
    """Rol embebido en el token de sesión."""
    ADMIN = "admin"
    CLIENT = "client"
    CORRESPONDENT = "correspondent"


class CorrespondentCategory(str, enum.Enum):
    ATTORNEY = "attorney"
    PROXY = "proxy"


class PrincipalMixin:
    """Columnas de acceso comunes a los tres tipos de principal."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Datos de acceso ──────────────────────────────
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    # ── Estado ───────────────────────────────────────
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Admin(PrincipalMixin, Base):
    __tablename__ = "admins"

    role = PrincipalRole.ADMIN

    name: Mapped[str] = mapped_column(String(150), nullable=False)

    @property
    def display_name(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<Admin {self.email}>"


class Client(PrincipalMixin, Base):
    __tablename__ = "clients"

    role = PrincipalRole.CLIENT

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    office: Mapped[str | None] = mapped_column(
        String(200), comment="Escritorio / firma del cliente"
    )
    phone: Mapped[str] = mapped_column(String(30), nullable=False)

    @property
    def display_name(self) -> str:
        return self.full_name

    def __repr__(self) -> str:
        return f"<Client {self.email}>"


class Correspondent(PrincipalMixin, Base):
    __tablename__ = "correspondents"

    role = PrincipalRole.CORRESPONDENT

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[CorrespondentCategory] = mapped_column(
        Enum(CorrespondentCategory), nullable=False
    )
    oab_number: Mapped[str | None] = mapped_column(
        String(30), comment="Registro OAB, obligatorio para abogados"
    )
    rg: Mapped[str | None] = mapped_column(String(30))
    cpf: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    served_jurisdictions: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        default=list,
        nullable=False,
        comment="Comarcas atendidas",
    )

    @property
    def display_name(self) -> str:
        return self.full_name

    def __repr__(self) -> str:
        return f"<Correspondent {self.email} ({self.category.value})>"
