"""
Servicio de Audit Log — historial de acciones sobre una demanda.
INSERT-only, nunca se modifica ni elimina.

La escritura es best-effort: corre dentro de un SAVEPOINT y cualquier
fallo se registra en el log del servidor sin propagarse, de modo que
la operación principal nunca falla por culpa de la auditoría.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.auth.dependencies import TokenPayload
from jurisconnect.models.audit_log import AuditAction, AuditLog

logger = logging.getLogger(__name__)


def _sanitize_for_json(data: dict | None) -> dict | None:
    """Convierte tipos no serializables (date, datetime, Decimal, Enum) a JSON."""
    if data is None:
        return None
    sanitized = {}
    for key, value in data.items():
        if isinstance(value, (date, datetime)):
            sanitized[key] = value.isoformat()
        elif isinstance(value, Enum):
            sanitized[key] = value.value
        elif isinstance(value, Decimal):
            sanitized[key] = float(value)
        elif isinstance(value, dict):
            sanitized[key] = _sanitize_for_json(value)
        elif isinstance(value, list):
            sanitized[key] = [
                _sanitize_for_json(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            sanitized[key] = value
    return sanitized


async def _write_entry(db: AsyncSession, entry: AuditLog) -> None:
    async with db.begin_nested():
        db.add(entry)
        await db.flush()


async def record(
    db: AsyncSession,
    *,
    demanda_id: int,
    actor: TokenPayload,
    action: AuditAction,
    details: dict | None = None,
) -> AuditLog | None:
    """Inserta un registro de auditoría inmutable. Retorna None si falló."""
    entry = AuditLog(
        demanda_id=demanda_id,
        actor_id=actor.principal_id,
        actor_role=actor.role,
        action=action,
        details=_sanitize_for_json(details),
    )
    try:
        await _write_entry(db, entry)
    except Exception:
        logger.exception(
            "No se pudo registrar la auditoría %s de demanda=%s actor=%s:%s",
            action.value, demanda_id, actor.role.value, actor.principal_id,
        )
        if entry in db:
            db.expunge(entry)
        return None
    return entry


async def list_for_demanda(db: AsyncSession, demanda_id: int) -> list[AuditLog]:
    """Historial de una demanda, más reciente primero."""
    result = await db.execute(
        select(AuditLog)
        .where(AuditLog.demanda_id == demanda_id)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
    )
    return list(result.scalars().all())
