"""
trust_broker/main.py — Ponto de entrada do Trust Broker.

Serviços se registram (/register), pedem api_keys para chamar uns aos
outros (/get-token) e validam os api_keys que recebem (/validate).
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from trust_broker.config import settings
from trust_broker.database import check_connection, init_db
from trust_broker.controllers.validation_controller import INVALID_OR_EXPIRED
from trust_broker.errors import BrokerError, ValidationError
from trust_broker.routes.register_routes import router as register_router
from trust_broker.routes.token_routes import router as token_router
from trust_broker.routes.validate_routes import router as validate_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 Iniciando {settings.APP_NAME} na porta {settings.APP_PORT}...")
    await init_db()
    await check_connection()
    yield
    logger.info("🛑 Encerrando servidor.")


app = FastAPI(
    title="Trust Broker",
    description="Registro de serviços e api_keys de curta duração entre backends.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.APP_ENV == "development" else None,
    redoc_url=None,
)

app.include_router(register_router)
app.include_router(token_router)
app.include_router(validate_router)


@app.exception_handler(BrokerError)
async def broker_error_handler(request: Request, exc: BrokerError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_response().model_dump())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """
    Body malformado (JSON inválido, array no lugar de objeto, tipo errado).
    No /validate a resposta continua sendo um veredito; nos demais vira
    ValidationError no formato { error, code, details }.
    """
    details = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    logger.warning(f"⚠️ Request malformada em {request.url.path}: {details}")
    if request.url.path == "/validate":
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"valid": False, "error": INVALID_OR_EXPIRED},
        )
    return await broker_error_handler(request, ValidationError("Invalid request", details))


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "app": settings.APP_NAME}


@app.get("/", tags=["Health"])
async def root():
    return {"status": "ok", "app": settings.APP_NAME}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "trust_broker.main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.APP_ENV == "development",
    )
