"""API router aggregating all endpoint routers."""

from fastapi import APIRouter

from app.api.endpoints import (
    files,
    locations_http,
    rpc_locations,
    rpc_users,
    rpc_visit_photos,
    rpc_visits,
    visit_history,
)

api_router = APIRouter()

# JSON procedures: /rpc/<router>.<procedure>
api_router.include_router(rpc_users.router)
api_router.include_router(rpc_locations.router)
api_router.include_router(rpc_visits.router)
api_router.include_router(rpc_visit_photos.router)

# HTTP routes
api_router.include_router(locations_http.router)
api_router.include_router(visit_history.router)
api_router.include_router(files.router)
