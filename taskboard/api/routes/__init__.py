"""
API routes aggregation.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .users import router as users_router
from .tasks import router as tasks_router
from .projects import router as projects_router
from .rbac import router as rbac_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(users_router, prefix="/users", tags=["users"])
router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
router.include_router(projects_router, prefix="/projects", tags=["projects"])
router.include_router(rbac_router, prefix="/rbac", tags=["rbac"])
