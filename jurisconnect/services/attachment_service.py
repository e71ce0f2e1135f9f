"""
Servicio de anexos: guarda el archivo en disco y registra sus metadatos.
"""

import asyncio
import logging
import secrets
import time
from pathlib import Path

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jurisconnect.auth.dependencies import TokenPayload
from jurisconnect.config import get_settings
from jurisconnect.core.exceptions import BadRequestException
from jurisconnect.models.attachment import Attachment
from jurisconnect.models.audit_log import AuditAction
from jurisconnect.services import audit_service
from jurisconnect.services.demanda_service import get_visible_demanda

logger = logging.getLogger(__name__)
settings = get_settings()

UPLOAD_CHUNK_BYTES = 1024 * 1024


def build_storage_name(demanda_id: int, original_name: str) -> str:
    """Nombre único: demanda-<id>-<timestamp ms>-<aleatorio><ext>."""
    suffix = Path(original_name).suffix.lower()
    unique = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
    return f"demanda-{demanda_id}-{unique}{suffix}"


def _validate_file(file: UploadFile) -> None:
    if not file.filename:
        raise BadRequestException("No se envió ningún archivo")
    if file.content_type not in settings.UPLOAD_ALLOWED_MIME_TYPES:
        raise BadRequestException(
            "Tipo de archivo inválido. Solo se permiten imágenes, PDFs y documentos Word"
        )


async def _read_limited(file: UploadFile) -> bytes:
    """Lee el archivo por bloques y corta apenas supera el tamaño máximo."""
    max_bytes = settings.UPLOAD_MAX_BYTES
    chunks = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise BadRequestException(
                f"El archivo supera el tamaño máximo de {max_bytes // (1024 * 1024)} MB"
            )
        chunks.append(chunk)
    if total == 0:
        raise BadRequestException("El archivo está vacío")
    return b"".join(chunks)


def _store(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


async def upload_attachment(
    db: AsyncSession,
    demanda_id: int,
    principal: TokenPayload,
    file: UploadFile,
) -> Attachment:
    """Adjunta un archivo a una demanda visible para el principal."""
    await get_visible_demanda(db, demanda_id, principal)

    _validate_file(file)
    content = await _read_limited(file)

    storage_path = Path(settings.UPLOAD_DIR) / build_storage_name(demanda_id, file.filename)
    await asyncio.to_thread(_store, storage_path, content)

    attachment = Attachment(
        demanda_id=demanda_id,
        uploader_id=principal.principal_id,
        uploader_role=principal.role,
        original_name=file.filename,
        storage_path=str(storage_path),
        mime_type=file.content_type,
        size_bytes=len(content),
    )
    try:
        db.add(attachment)
        await db.flush()
    except Exception:
        # Sin fila de metadatos el archivo quedaría huérfano en disco.
        await asyncio.to_thread(storage_path.unlink, missing_ok=True)
        raise
    await db.refresh(attachment)

    await audit_service.record(
        db,
        demanda_id=demanda_id,
        actor=principal,
        action=AuditAction.ATTACHMENT_UPLOAD,
        details={"file": attachment.original_name, "attachment_id": attachment.id},
    )

    logger.info(
        "Anexo %s guardado para demanda %s (%s bytes)",
        attachment.id, demanda_id, attachment.size_bytes,
    )
    return attachment


async def list_attachments(
    db: AsyncSession,
    demanda_id: int,
    principal: TokenPayload,
) -> list[Attachment]:
    """Anexos de una demanda visible para el principal, más reciente primero."""
    await get_visible_demanda(db, demanda_id, principal)
    result = await db.execute(
        select(Attachment)
        .where(Attachment.demanda_id == demanda_id)
        .order_by(Attachment.created_at.desc(), Attachment.id.desc())
    )
    return list(result.scalars().all())
