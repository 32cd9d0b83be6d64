# informes/api/main.py

from datetime import datetime, timezone

from fastapi import FastAPI

from authentication.api.routes import router as auth_router
from authentication.infrastructure.database_connection import conectar_base, cerrar_conexion
from informes.api.routes import router as informes_router
from informes.infrastructure.database_reader import verificar_conexion

app = FastAPI(
    title="LOGISAMB - Backend API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={"persistAuthorization": True}
)

app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(informes_router)


@app.get("/health", tags=["Health"])
def healthcheck():
    """Estado del servicio y conectividad con la base de datos."""
    conn = conectar_base()
    base_ok = conn is not None and verificar_conexion(conn)
    cerrar_conexion(conn)
    return {
        "status": "ok" if base_ok else "degraded",
        "service": "logisamb-backend",
        "database": "connected" if base_ok else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
