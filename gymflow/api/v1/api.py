from fastapi import APIRouter

from gymflow.api.v1.endpoints import (
    admin, analytics, announcements, gyms, macros, members, memberships, plans, schedule, ws
)

api_router = APIRouter()

# Gyms module
api_router.include_router(gyms.router, prefix="/gyms", tags=["gyms"])

# Members module
api_router.include_router(members.router, prefix="/members", tags=["members"])

# Membership requests module
api_router.include_router(memberships.router, prefix="/memberships", tags=["memberships"])

# Trainer schedule and bookings module
api_router.include_router(schedule.router, prefix="/schedule", tags=["schedule"])

# Plans module (requests, workout and diet plans)
api_router.include_router(plans.router, prefix="/plans", tags=["plans"])

# Announcements module
api_router.include_router(announcements.router, prefix="/announcements", tags=["announcements"])

# Real-time channel
api_router.include_router(ws.router, prefix="/ws")

# Macro logging module
api_router.include_router(macros.router, prefix="/macros", tags=["macros"])

# Usage analytics
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])

# Admin module
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
