"""
Crea el primer administrador desde la línea de comandos.

Uso:
    python scripts/create_admin.py <email> <nombre>

La contraseña se pide por consola para no dejarla en el historial.
"""

import asyncio
import getpass
import sys
from pathlib import Path

from pydantic import ValidationError

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from jurisconnect.core.exceptions import ConflictException  # noqa: E402
from jurisconnect.database import async_session_factory, engine  # noqa: E402
from jurisconnect.schemas.principal import AdminCreate  # noqa: E402
from jurisconnect.services import auth_service  # noqa: E402


async def create_admin(data: AdminCreate) -> None:
    async with async_session_factory() as db:
        try:
            admin = await auth_service.create_admin(db, data)
        except ConflictException as exc:
            print(f"ERROR: {exc.detail}")
            sys.exit(1)
        await db.commit()
        print(f"Administrador creado: id={admin.id} email={admin.email}")
    await engine.dispose()


def main():
    if len(sys.argv) < 3:
        print("Uso: python scripts/create_admin.py <email> <nombre>")
        sys.exit(1)

    password = getpass.getpass("Contraseña: ")
    if password != getpass.getpass("Repita la contraseña: "):
        print("ERROR: las contraseñas no coinciden")
        sys.exit(1)

    try:
        data = AdminCreate(email=sys.argv[1], name=sys.argv[2], password=password)
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(p) for p in error["loc"])
            print(f"ERROR: {field}: {error['msg']}")
        sys.exit(1)

    asyncio.run(create_admin(data))


if __name__ == "__main__":
    main()
