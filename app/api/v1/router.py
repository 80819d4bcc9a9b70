from fastapi import APIRouter
from app.api.v1.endpoints import (
    auth, businesses, users, staff, services, appointments, queue, public, dashboard, cron, realtime,
)

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(businesses.router, prefix="/businesses", tags=["businesses"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(queue.router, prefix="/queue", tags=["queue"])
api_router.include_router(public.router, prefix="/public", tags=["public"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(cron.router, prefix="/cron", tags=["cron"])
api_router.include_router(realtime.router, prefix="/realtime", tags=["realtime"])
