"""
Gestión de tokens de sesión JWT.
Stateless: la expiración es el único mecanismo de invalidación.
"""

from datetime import datetime, timedelta, timezone

import jwt

from jurisconnect.config import get_settings
from jurisconnect.models.principal import PrincipalRole

settings = get_settings()


class TokenType:
    ACCESS = "access"


def access_token_ttl_seconds() -> int:
    return settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60


def create_access_token(
    principal_id: int,
    role: PrincipalRole,
    email: str,
) -> str:
    """Crea un access token firmado con {id, rol, email}."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(principal_id),
        "role": role.value,
        "email": email,
        "type": TokenType.ACCESS,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(
        payload,
        settings.jwt_signing_key,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> dict:
    """
    Decodifica y verifica un token JWT.
    Lanza jwt.InvalidTokenError si el token es inválido o expirado.
    """
    return jwt.decode(
        token,
        settings.jwt_verification_key,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
