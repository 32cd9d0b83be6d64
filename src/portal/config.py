#portal/config.py

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # JSON estático remoto (vacío = deshabilitado)
    EXTERNAL_JSON_BASE_URL: str = ""
    EXTERNAL_GUIAS_PATH: str = "/data/guias.json"
    EXTERNAL_FACTURAS_PATH: str = "/data/facturas-impagas.json"
    EXTERNAL_CLIENTES_PATH: str = "/data/clientes.json"
    EXTERNAL_USUARIOS_PATH: str = "/data/usuarios.json"
    EXTERNAL_TIMEOUT_SEGUNDOS: float = 10.0

    # API backend (informes.api.main)
    BACKEND_API_URL: str = "http://localhost:3001"
    BACKEND_TIMEOUT_SEGUNDOS: float = 10.0

    # 👈 en modo demo no se llama al backend (login ni registros)
    MODO_DEMO: bool = False
    CACHE_TTL_SEGUNDOS: int = 300
    SESSION_FILE: str = "~/.logisamb/session.json"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
