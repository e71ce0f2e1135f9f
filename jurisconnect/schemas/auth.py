"""
Schemas de autenticación: login y token de sesión.
"""

from pydantic import BaseModel, EmailStr, Field

from jurisconnect.models.principal import PrincipalRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class PrincipalLoginData(BaseModel):
    """Datos del principal autenticado (nunca incluye el hash)."""
    id: int
    name: str
    email: str
    role: PrincipalRole


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Segundos hasta la expiración del token")
    principal: PrincipalLoginData
