from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from vault.services.record_service import (
    RecordService,
    VaultError,
    ValidationError,
    RecordNotFoundError,
)
from vault.services.report_service import record_to_dict, stats_to_dict

router = APIRouter(tags=["records"])

FEATURES = ["CRUD", "Search", "Sort", "Export", "Backup", "Statistics"]


def _get_record_service(request: Request) -> RecordService:
    svc = getattr(getattr(request.app, "state", None), "record_service", None)
    if not svc:
        raise RuntimeError("RecordService not configured")
    return svc


def _error(exc: VaultError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        status = 400
    elif isinstance(exc, RecordNotFoundError):
        status = 404
    else:
        status = 500
    return JSONResponse({"success": False, "error": exc.message}, status_code=status)


def _records_payload(records) -> dict:
    return {
        "success": True,
        "count": len(records),
        "data": [record_to_dict(record) for record in records],
    }


@router.get("/")
def index():
    return {
        "message": "Secure Data Vault API is running",
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "features": FEATURES,
    }


@router.get("/records")
def list_records(request: Request):
    svc = _get_record_service(request)
    try:
        records = svc.list_records()
    except VaultError as exc:
        return _error(exc)
    return _records_payload(records)


@router.post("/records", status_code=201)
def create_record(request: Request, payload: dict):
    svc = _get_record_service(request)
    try:
        record = svc.add_record(payload.get("name"), record_id=payload.get("id"))
    except VaultError as exc:
        return _error(exc)
    return {
        "success": True,
        "message": "Record added successfully",
        "data": record_to_dict(record),
    }


@router.put("/records/{token}")
def update_record(token: str, request: Request, payload: dict):
    svc = _get_record_service(request)
    try:
        record = svc.update_record(token, payload.get("name"))
    except VaultError as exc:
        return _error(exc)
    return {
        "success": True,
        "message": "Record updated successfully",
        "data": record_to_dict(record),
    }


@router.delete("/records/{token}")
def delete_record(token: str, request: Request):
    svc = _get_record_service(request)
    try:
        record = svc.delete_record(token)
    except VaultError as exc:
        return _error(exc)
    return {
        "success": True,
        "message": "Record deleted successfully",
        "data": record_to_dict(record),
    }


@router.get("/search")
def search_records(request: Request, keyword: str = ""):
    svc = _get_record_service(request)
    try:
        records = svc.search(keyword)
    except VaultError as exc:
        return _error(exc)
    return _records_payload(records)


@router.get("/sort")
def sort_records(request: Request, field: str = "name", order: str = "asc"):
    svc = _get_record_service(request)
    try:
        result = svc.sort_records(field, order)
    except VaultError as exc:
        return _error(exc)
    payload = _records_payload(result.records)
    payload.update({"field": result.field, "order": result.direction})
    if result.warning:
        payload["warning"] = result.warning
    return payload


@router.get("/stats")
def stats(request: Request):
    svc = _get_record_service(request)
    try:
        data = stats_to_dict(svc.statistics())
    except VaultError as exc:
        return _error(exc)
    return {"success": True, "data": data}


@router.get("/export")
def export(request: Request):
    svc = _get_record_service(request)
    try:
        path = svc.export()
    except VaultError as exc:
        return _error(exc)
    return {
        "success": True,
        "message": f"Data exported successfully to {path.name}",
        "file": path.name,
    }
