from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vault.core.config import Settings, get_settings
from vault.db.session import Database
from vault.repositories.sql_repository import SQLRepository
from vault.routers import records as records_router
from vault.services.record_service import RecordService


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies and parameters with the usual error envelope."""
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    if errors and tuple(errors[0].get("loc", ()))[:1] == ("body",):
        detail = f"Request body must be a JSON object ({detail})"
    return JSONResponse({"success": False, "error": detail}, status_code=400)


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    record_service: RecordService | None = None,
) -> FastAPI:
    """Factory compatible with uvicorn (``uvicorn --factory vault.app:create_app``)."""
    settings = settings or get_settings()
    if record_service is None:
        database = database or Database.from_settings(settings)
        record_service = RecordService.from_settings(settings, SQLRepository(database))

    app = FastAPI(title="Secure Data Vault API")
    app.state.settings = settings
    app.state.record_service = record_service
    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.include_router(records_router.router)
    return app
