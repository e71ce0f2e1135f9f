"""
Modelos SQLAlchemy — exportar todos para que Alembic los detecte.
"""

from jurisconnect.models.principal import (
    Admin,
    Client,
    Correspondent,
    CorrespondentCategory,
    PrincipalRole,
)
from jurisconnect.models.demanda import Demanda, DemandaStatus
from jurisconnect.models.attachment import Attachment
from jurisconnect.models.audit_log import AuditAction, AuditLog

__all__ = [
    "Admin",
    "Client",
    "Correspondent",
    "CorrespondentCategory",
    "PrincipalRole",
    "Demanda",
    "DemandaStatus",
    "Attachment",
    "AuditAction",
    "AuditLog",
]
