"""
Definición de permisos RBAC por rol.
Allow-lists por recurso y acción usadas a nivel de ruta; los chequeos
de propiedad (dueño / asignado) viven en `jurisconnect.auth.ownership`.
"""

from jurisconnect.models.principal import PrincipalRole

ADMIN = PrincipalRole.ADMIN
CLIENT = PrincipalRole.CLIENT
CORRESPONDENT = PrincipalRole.CORRESPONDENT
ALL_ROLES = [ADMIN, CLIENT, CORRESPONDENT]

# ── Permisos por recurso ─────────────────────────────
# Formato: {recurso: {acción: [roles permitidos]}}
PERMISSIONS: dict[str, dict[str, list[PrincipalRole]]] = {
    "demanda": {
        "create": [CLIENT],
        "read": ALL_ROLES,
        "update": [ADMIN, CLIENT],
        "assign": [ADMIN],
        "change_status": [ADMIN, CORRESPONDENT],
    },
    "attachment": {
        "create": ALL_ROLES,
        "read": ALL_ROLES,
    },
    "client": {
        "create": [ADMIN],
        "read": [ADMIN],
        "update": [ADMIN],
        "change_status": [ADMIN],
    },
    "correspondent": {
        "create": [ADMIN],
        "read": [ADMIN],
        "update": [ADMIN],
        "change_status": [ADMIN],
    },
    "admin": {
        "create": [ADMIN],
        "read": [ADMIN],
        "update": [ADMIN],
        "change_status": [ADMIN],
    },
    "dashboard": {
        "read": [ADMIN],
    },
}


def allowed_roles(resource: str, action: str) -> list[PrincipalRole]:
    return PERMISSIONS.get(resource, {}).get(action, [])
