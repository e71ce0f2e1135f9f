"""
Dependencies de FastAPI para autenticación y autorización por rol.

La autenticación (token válido) siempre precede a la autorización
(rol permitido): `require_role` depende de `get_current_principal`.
"""

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jurisconnect.auth.jwt import TokenType, decode_token
from jurisconnect.auth.rbac import allowed_roles
from jurisconnect.core.exceptions import CredentialsException, ForbiddenException
from jurisconnect.models.principal import PrincipalRole

# ── Security scheme ──────────────────────────────────
# auto_error=False para devolver nuestro propio 401 cuando falta el header.
security = HTTPBearer(auto_error=False)


# ── Token payload tipado ─────────────────────────────
class TokenPayload:
    """Claims del token decodificado; único estado por request."""

    def __init__(self, payload: dict):
        self.principal_id: int = int(payload["sub"])
        self.role: PrincipalRole = PrincipalRole(payload["role"])
        self.email: str = payload.get("email", "")
        self.token_type: str = payload.get("type", TokenType.ACCESS)

    def __repr__(self) -> str:
        return f"<TokenPayload {self.role.value}:{self.principal_id}>"


# ── Obtener principal actual ─────────────────────────
async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> TokenPayload:
    """Decodifica el JWT del header Authorization sin consultar la DB."""
    if credentials is None:
        raise CredentialsException("No se proporcionó token de autenticación")

    try:
        payload = decode_token(credentials.credentials)
        token_data = TokenPayload(payload)
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise CredentialsException("Token inválido o expirado")

    if token_data.token_type != TokenType.ACCESS:
        raise CredentialsException("Tipo de token inválido")

    return token_data


# ── Factory de dependency con roles ──────────────────
def require_role(*allowed_roles: PrincipalRole):
    """
    Factory que crea un dependency que verifica el rol del principal.

    Uso:
        @router.patch("/{id}/assign")
        async def assign(principal: TokenPayload = Depends(require_role(PrincipalRole.ADMIN))):
            ...
    """

    async def _check_role(
        principal: TokenPayload = Depends(get_current_principal),
    ) -> TokenPayload:
        if principal.role not in allowed_roles:
            raise ForbiddenException(
                f"Se requiere uno de los roles: {', '.join(r.value for r in allowed_roles)}"
            )
        return principal

    return _check_role


def require_permission(resource: str, action: str):
    """Atajo sobre `require_role` usando la tabla de permisos RBAC."""
    return require_role(*allowed_roles(resource, action))
