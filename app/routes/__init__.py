# app/routes/__init__.py
from fastapi import APIRouter
from app.routes.auth import auth
from app.routes.admins import admin_routes
from app.routes.ratings import rating_routes
from app.routes.feedback import feedback_routes
from app.routes.regions import region_routes
from app.routes.logs import log_routes
from app.routes.users import user_routes


api_router = APIRouter()

# Auth routes
api_router.include_router(auth.router)

# Admin directory
api_router.include_router(admin_routes.router)

# Public submissions and their admin views
api_router.include_router(rating_routes.router)
api_router.include_router(feedback_routes.router)

# Region directory
api_router.include_router(region_routes.router)

# Audit log and submitters
api_router.include_router(log_routes.router)
api_router.include_router(user_routes.router)
