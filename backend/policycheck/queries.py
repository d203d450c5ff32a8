"""Analysis cache: set and get JSON by key (Valkey-backed), with Pydantic support."""

import json
from typing import TypeVar

from pydantic import BaseModel

from policycheck.db import get_client

T = TypeVar("T", bound=BaseModel)

ANALYSIS_CACHE_PREFIX = "policycheck:analysis:"


def analysis_cache_key(domain: str, registry_version: str) -> str:
    """Cache key per registered domain; a registry bump invalidates old entries."""
    return f"{ANALYSIS_CACHE_PREFIX}{registry_version}:{domain or 'no_domain'}"


def set_json(key: str, value: BaseModel, *, ttl_seconds: int | None = None) -> None:
    """Store a Pydantic model under the given key as JSON."""
    client = get_client()
    client.set(key, value.model_dump_json().encode("utf-8"), ex=ttl_seconds)


def get_json(key: str, model: type[T]) -> T | None:
    """
    Retrieve a value by key, parse as JSON, and validate into the given Pydantic model.
    Returns an instance of the model or None if the key is missing.
    """
    client = get_client()
    raw = client.get(key)
    if raw is None:
        return None
    data = json.loads(raw.decode("utf-8"))
    return model.model_validate(data)
