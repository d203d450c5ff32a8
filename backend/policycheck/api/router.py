"""API router: aggregates all endpoints."""

from fastapi import APIRouter

from policycheck.api import assessments, check, health, registry, root

api_router = APIRouter()

api_router.include_router(root.router)
api_router.include_router(health.router)
api_router.include_router(check.router)
api_router.include_router(assessments.router)
api_router.include_router(registry.router)
