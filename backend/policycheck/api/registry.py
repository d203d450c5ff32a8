"""Clause registry endpoint."""

from fastapi import APIRouter, Response

from policycheck.engine.registry import DEFAULT_REGISTRY

router = APIRouter(tags=["registry"])

REGISTRY_CACHE_CONTROL = "public, max-age=86400"


@router.get("/clause-registry")
def clause_registry(response: Response) -> dict:
    """Versioned table of every clause type the analyzer can report."""
    response.headers["Cache-Control"] = REGISTRY_CACHE_CONTROL
    return DEFAULT_REGISTRY.as_table()
