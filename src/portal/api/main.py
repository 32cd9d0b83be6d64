#portal/api/main.py

from fastapi import FastAPI

from portal.api.routes import router
from portal.config import settings

app = FastAPI(
    title="LOGISAMB - Portal de Clientes",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    swagger_ui_parameters={"persistAuthorization": True}
)

app.include_router(router)


@app.get("/health", tags=["Health"])
def healthcheck():
    return {
        "status": "ok",
        "service": "portal",
        "modo_demo": settings.MODO_DEMO,
        "json_externo": bool(settings.EXTERNAL_JSON_BASE_URL),
    }
