"""
Schemas para Demanda — solicitudes de diligencia.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from jurisconnect.models.audit_log import AuditAction
from jurisconnect.models.demanda import DemandaStatus
from jurisconnect.models.principal import PrincipalRole


class DemandaCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    process_number: str | None = Field(None, max_length=50)
    category: str | None = Field(None, max_length=100)
    deadline: date | None = None
    proposed_value: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)


class DemandaUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1)
    process_number: str | None = Field(None, max_length=50)
    category: str | None = Field(None, max_length=100)
    deadline: date | None = None
    proposed_value: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)

    @field_validator("title", "description", "proposed_value")
    @classmethod
    def not_null(cls, value):
        # Se pueden omitir, pero no vaciar: son columnas NOT NULL.
        if value is None:
            raise ValueError("El campo no puede ser nulo")
        return value


class DemandaAssign(BaseModel):
    """El id se valida en el servicio, después de comprobar que la demanda existe."""
    correspondent_id: int | None = Field(None, ge=1)


class DemandaStatusChange(BaseModel):
    status: DemandaStatus | None = None


class DemandaResponse(BaseModel):
    id: int
    title: str
    description: str
    process_number: str | None = None
    category: str | None = None
    deadline: date | None = None
    proposed_value: Decimal
    status: DemandaStatus
    client_id: int
    correspondent_id: int | None = None

    # Datos de relaciones
    client_name: str | None = None
    correspondent_name: str | None = None

    created_at: datetime
    updated_at: datetime


class AuditLogResponse(BaseModel):
    id: int
    demanda_id: int
    actor_id: int
    actor_role: PrincipalRole
    action: AuditAction
    details: dict | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
