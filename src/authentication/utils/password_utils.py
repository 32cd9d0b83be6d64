# authentication/utils/password_utils.py

import bcrypt


def generar_hash_clave(clave: str) -> str:
    return bcrypt.hashpw(clave.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verificar_clave(clave: str, clave_hash: str) -> bool:
    try:
        return bcrypt.checkpw(clave.encode("utf-8"), clave_hash.encode("utf-8"))
    except ValueError:
        # hash mal formado (p. ej. clave en texto plano heredada)
        return False
