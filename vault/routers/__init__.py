"""
FastAPI routers.

Each file inside this package exposes an APIRouter that is included in the
application built by vault.app.create_app.
"""
