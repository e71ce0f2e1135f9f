"""
Reglas de acceso a nivel de registro para demandas.
Complementan el control por rol de `require_role`.
"""

from jurisconnect.auth.dependencies import TokenPayload
from jurisconnect.core.exceptions import ForbiddenException
from jurisconnect.models.demanda import Demanda, DemandaStatus
from jurisconnect.models.principal import PrincipalRole


def can_view_demanda(principal: TokenPayload, demanda: Demanda) -> bool:
    """Admin, el cliente dueño o el corresponsal asignado."""
    if principal.role == PrincipalRole.ADMIN:
        return True
    if principal.role == PrincipalRole.CLIENT:
        return demanda.client_id == principal.principal_id
    if principal.role == PrincipalRole.CORRESPONDENT:
        return demanda.correspondent_id == principal.principal_id
    return False


def can_change_status(principal: TokenPayload, demanda: Demanda) -> bool:
    """Admin siempre; corresponsal solo si es el asignado."""
    if principal.role == PrincipalRole.ADMIN:
        return True
    return (
        principal.role == PrincipalRole.CORRESPONDENT
        and demanda.correspondent_id is not None
        and demanda.correspondent_id == principal.principal_id
    )


def can_edit_demanda(principal: TokenPayload, demanda: Demanda) -> bool:
    """Admin, o el cliente dueño mientras la demanda sigue pendiente."""
    if principal.role == PrincipalRole.ADMIN:
        return True
    return (
        principal.role == PrincipalRole.CLIENT
        and demanda.client_id == principal.principal_id
        and demanda.status == DemandaStatus.PENDING
    )


def ensure_can_view(principal: TokenPayload, demanda: Demanda) -> None:
    if not can_view_demanda(principal, demanda):
        raise ForbiddenException("No tiene acceso a esta demanda")


def ensure_can_change_status(principal: TokenPayload, demanda: Demanda) -> None:
    if not can_change_status(principal, demanda):
        raise ForbiddenException(
            "Solo un administrador o el corresponsal asignado puede cambiar el estado"
        )


def ensure_can_edit(principal: TokenPayload, demanda: Demanda) -> None:
    if not can_edit_demanda(principal, demanda):
        raise ForbiddenException("No puede editar esta demanda")
