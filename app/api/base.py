from fastapi import APIRouter
from app.api import health
from app.features.timer_sessions.api import router as timer_sessions_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(timer_sessions_router)
