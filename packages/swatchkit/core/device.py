"""Host detection: worker concurrency and the default cache scope key."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import platform
import socket

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

MIN_WORKERS = 1
MAX_WORKERS = 8
DEFAULT_CORES = 4


class DeviceInfo(BaseModel):
    """Stable facts about the host used to size the pool and scope the cache."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    system: str
    machine: str
    hostname: str
    python_version: str
    cpu_count: int


def clamp_workers(count: int) -> int:
    """Clamp a worker count to [1, 8]."""
    return max(MIN_WORKERS, min(MAX_WORKERS, int(count)))


def detect_cpu_count() -> int:
    """Usable CPUs for this process, falling back to 4 when unknown."""
    if hasattr(os, "sched_getaffinity"):
        try:
            return len(os.sched_getaffinity(0)) or DEFAULT_CORES
        except OSError:
            pass
    return os.cpu_count() or DEFAULT_CORES


def detect_concurrency(cpu_count: int | None = None) -> int:
    """Default pool size: one less than the CPU count, clamped to [1, 8].

    Example:
        >>> detect_concurrency(16)
        8
        >>> detect_concurrency(1)
        1
    """
    cores = cpu_count if cpu_count is not None else detect_cpu_count()
    return clamp_workers(cores - 1)


def detect_device() -> DeviceInfo:
    return DeviceInfo(
        system=platform.system().lower() or "unknown",
        machine=platform.machine() or "unknown",
        hostname=socket.gethostname(),
        python_version=platform.python_version(),
        cpu_count=detect_cpu_count(),
    )


def device_fingerprint(info: DeviceInfo | None = None) -> str:
    """16-character scope key derived from the device facts.

    Deterministic for a given DeviceInfo; distinct hosts get distinct
    cache scopes.
    """
    info = info or detect_device()
    canonical = json.dumps(info.model_dump(), sort_keys=True, separators=(",", ":"))
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
    logger.debug("Device fingerprint %s (%s/%s)", digest, info.system, info.machine)
    return digest


__all__ = [
    "DeviceInfo",
    "MAX_WORKERS",
    "MIN_WORKERS",
    "clamp_workers",
    "detect_concurrency",
    "detect_cpu_count",
    "detect_device",
    "device_fingerprint",
]
