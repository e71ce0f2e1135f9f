"""
Schemas para anexos de demandas.
"""

from datetime import datetime

from pydantic import BaseModel

from jurisconnect.models.principal import PrincipalRole


class AttachmentResponse(BaseModel):
    id: int
    demanda_id: int
    uploader_id: int
    uploader_role: PrincipalRole
    original_name: str
    mime_type: str
    size_bytes: int
    created_at: datetime

    model_config = {"from_attributes": True}


class AttachmentUploadResponse(BaseModel):
    message: str = "Archivo enviado correctamente"
    attachment: AttachmentResponse
