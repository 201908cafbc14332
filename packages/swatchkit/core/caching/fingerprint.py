"""Deterministic fingerprints for cache keys."""

import hashlib
import json
from typing import Any

from swatchkit.core.caching.models import CacheKey


def compute_fingerprint(
    step_id: str,
    step_version: str,
    inputs: dict[str, Any],
) -> str:
    """
    Hash a step identity and its inputs.

    Canonical JSON (sorted keys, compact separators) keeps the digest stable
    across processes and runs.

    Args:
        step_id: Step identifier
        step_version: Step version
        inputs: Values that affect the output

    Returns:
        SHA256 hex digest (64 chars)

    Example:
        >>> len(compute_fingerprint("search.swatches", "1", {"arity": 3}))
        64
    """
    canonical = json.dumps(
        {"step_id": step_id, "step_version": step_version, "inputs": inputs},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def make_cache_key(step_id: str, step_version: str, inputs: dict[str, Any]) -> CacheKey:
    """Build a CacheKey for a step and its inputs."""
    return CacheKey(
        step_id=step_id,
        step_version=step_version,
        input_fingerprint=compute_fingerprint(step_id, step_version, inputs),
    )
