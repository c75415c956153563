"""
Top-level API router.

Aggregates the resource routers under a single router which the
application mounts at ``/api``.
"""

from fastapi import APIRouter

from .endpoints import issues

router = APIRouter()

# The issues router declares the ``{project}`` path parameter itself.
router.include_router(issues.router, prefix="/issues", tags=["issues"])
