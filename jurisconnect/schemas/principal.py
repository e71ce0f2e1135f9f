"""
Schemas para administradores, clientes y corresponsales.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, StrictBool, model_validator

from jurisconnect.models.principal import CorrespondentCategory, PrincipalRole


# ── Admin ────────────────────────────────────────────

class AdminCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=150)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class AdminUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=150)
    email: EmailStr | None = None


class AdminResponse(BaseModel):
    id: int
    name: str
    email: str
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


# ── Cliente ──────────────────────────────────────────

class ClientBase(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=200)
    office: str | None = Field(None, max_length=200)
    phone: str = Field(..., min_length=8, max_length=30)
    email: EmailStr


class ClientCreate(ClientBase):
    password: str = Field(..., min_length=8, max_length=128)


class ClientUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=2, max_length=200)
    office: str | None = Field(None, max_length=200)
    phone: str | None = Field(None, min_length=8, max_length=30)
    email: EmailStr | None = None


class ClientResponse(BaseModel):
    id: int
    full_name: str
    office: str | None = None
    phone: str
    email: str
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


# ── Corresponsal ─────────────────────────────────────

class CorrespondentBase(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=200)
    category: CorrespondentCategory
    oab_number: str | None = Field(None, max_length=30)
    rg: str | None = Field(None, max_length=30)
    cpf: str = Field(..., min_length=11, max_length=20)
    email: EmailStr
    phone: str = Field(..., min_length=8, max_length=30)
    served_jurisdictions: list[str] = Field(..., min_length=1)

    @model_validator(mode="after")
    def oab_required_for_attorneys(self):
        if self.category == CorrespondentCategory.ATTORNEY and not (
            self.oab_number and self.oab_number.strip()
        ):
            raise ValueError("El número de OAB es obligatorio para abogados")
        return self


class CorrespondentCreate(CorrespondentBase):
    password: str = Field(..., min_length=8, max_length=128)


class CorrespondentUpdate(CorrespondentBase):
    """Actualización completa (PUT): mismas reglas que el alta, sin contraseña."""


class CorrespondentResponse(BaseModel):
    id: int
    full_name: str
    category: CorrespondentCategory
    oab_number: str | None = None
    rg: str | None = None
    cpf: str
    email: str
    phone: str
    served_jurisdictions: list[str]
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


# ── Activación / desactivación ───────────────────────

class ActiveToggle(BaseModel):
    is_active: StrictBool


class ActiveToggleResponse(BaseModel):
    id: int
    is_active: bool
    message: str


# ── Perfil propio ────────────────────────────────────

class ProfileResponse(BaseModel):
    id: int
    role: PrincipalRole
    name: str
    email: str
    phone: str | None = None
    is_active: bool
    created_at: datetime


class ProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=200)
    phone: str | None = Field(None, min_length=8, max_length=30)
    password: str | None = Field(None, min_length=8, max_length=128)
