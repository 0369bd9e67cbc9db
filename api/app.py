# api/app.py
import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

import config
from api import expenses, linking, messages, webhooks
from api.dependencies import Services
from core.errors import AppError
from core.log import configure_logging

logger = logging.getLogger("gastos_api")


# -----------------------------
# Failure envelope handlers
# -----------------------------
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"[{exc.error_type.upper()}] path={request.url.path}, message={exc.message}")
    return JSONResponse(exc.to_envelope(), status_code=exc.status_code)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    body = {"error": {"type": "validation_error", "message": "Invalid request", "details": details}}
    return JSONResponse(body, status_code=400)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[ERROR] path={request.url.path}, exception={exc}")
    message = str(exc) if config.DEBUG else "An unexpected error occurred"
    return JSONResponse({"error": {"type": "internal_error", "message": message}}, status_code=500)


# -----------------------------
# FastAPI App
# -----------------------------
def create_app(services: Optional[Services] = None, *, api_key: Optional[str] = None) -> FastAPI:
    """
    Build the API. Passing `services` skips the production wiring
    (Prisma, Telegram, Gemini) entirely.
    """
    configure_logging()

    app = FastAPI(title="Gastos API", version="1.0")
    app.state.services = services
    app.state.api_key = config.API_KEY if api_key is None else api_key
    app.state.startup_error = None

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)

    app.include_router(expenses.router)
    app.include_router(linking.router)
    app.include_router(messages.router)
    app.include_router(webhooks.router)

    owns_services = services is None

    @app.on_event("startup")
    async def startup():
        if not owns_services:
            return
        from api.wiring import build_services

        try:
            app.state.services = await build_services()
            logger.info("✅ Services ready")
        except Exception as e:
            app.state.startup_error = str(e)
            logger.exception("❌ Failed to start services")
            if config.DEBUG:
                raise

    @app.on_event("shutdown")
    async def shutdown():
        if not owns_services or app.state.services is None:
            return
        from api.wiring import close_services

        await close_services(app.state.services)
        app.state.services = None

    @app.get("/")
    async def root():
        return {"message": "Gastos API is running."}

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        info: Dict[str, Any] = {"status": "ok", "ready": app.state.services is not None}
        if app.state.startup_error:
            info["error"] = app.state.startup_error
        return info

    return app


app = create_app()


# -----------------------------
# Entrypoint
# -----------------------------
if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", config.PORT))
    uvicorn.run("api.app:app", host="0.0.0.0", port=port, workers=1)
