"""
FastAPI routers grouped by domain (auth, users, mood logs, medications, etc.).

Each module exposes an APIRouter included by ``recovery_api.app``. Routers
talk to the Storage contract only, fetched through ``deps.get_storage``.
"""
