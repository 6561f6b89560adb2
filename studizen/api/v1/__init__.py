"""
API v1 Router

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from studizen.api.v1.endpoints import admin, auth, premium, schedules, tasks, users

router = APIRouter()

# Authentication and email verification
router.include_router(auth.router)

# Profile and preferences
router.include_router(users.router)

# Planner
router.include_router(schedules.router)
router.include_router(tasks.router)

# Subscriptions
router.include_router(premium.router)

# Administration
router.include_router(admin.router)
