# tests/conftest.py

import pytest

from authentication.application.auth_service import AuthService
from authentication.infrastructure.sample_auth_repository import RepositorioAuthEmbebido
from authentication.infrastructure.token_service import generar_token


@pytest.fixture(scope="session")
def repo_embebido():
    # 🔹 una sola instancia: el hash bcrypt de la clave demo se calcula una vez
    return RepositorioAuthEmbebido(clave_demo="demo123")


@pytest.fixture(scope="session")
def servicio_embebido(repo_embebido):
    return AuthService(repo_embebido)


@pytest.fixture
def token_copec():
    return generar_token(1, 57, "Administrador COPEC", "copec_admin")


@pytest.fixture
def token_shell():
    return generar_token(2, 58, "Operador SHELL", "shell_admin")


@pytest.fixture
def auth_copec(token_copec):
    return {"Authorization": f"Bearer {token_copec}"}


# --------
# Conexión psycopg2 falsa: registra SQL y devuelve filas en orden
# --------
class DummyCursor:
    def __init__(self, filas):
        self.filas = list(filas)
        self.ejecutadas = []

    def execute(self, sql, params=None):
        self.ejecutadas.append((sql, params))

    def fetchone(self):
        return self.filas.pop(0) if self.filas else None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


class DummyConn:
    def __init__(self, filas=()):
        self.cur = DummyCursor(filas)
        self.commits = 0
        self.rollbacks = 0
        self.cerrada = False

    def cursor(self, **kwargs):
        return self.cur

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.cerrada = True


@pytest.fixture
def conexion_falsa():
    return DummyConn
