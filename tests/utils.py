"""
Helpers de test compartidos entre módulos.
"""

from jurisconnect.auth.jwt import create_access_token

TEST_PASSWORD = "TestPass123"


def auth_headers(principal) -> dict:
    """Header Authorization con un token válido para el principal."""
    token = create_access_token(principal.id, principal.role, principal.email)
    return {"Authorization": f"Bearer {token}"}


NEW_DEMANDA = {
    "title": "Protocolo de petição",
    "description": "Protocolar petição inicial no fórum de Campinas",
    "process_number": "0009999-11.2026.8.26.0114",
    "category": "protocolo",
    "deadline": "2026-11-30",
    "proposed_value": "180.50",
}
