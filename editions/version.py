"""editions.version — semantic version resolution.

Resolution order (first match wins):
- EDITIONS_VERSION environment override
- installed distribution metadata (``editions-ledger``)
- BASE_VERSION fallback
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata as importlib_metadata

BASE_VERSION = "0.1.0"
DIST_NAME = "editions-ledger"


@lru_cache(maxsize=1)
def compute_version() -> str:
    env = os.getenv("EDITIONS_VERSION")
    if env:
        return env.strip()
    try:
        return importlib_metadata.version(DIST_NAME)
    except importlib_metadata.PackageNotFoundError:
        return BASE_VERSION


__version__ = compute_version()

__all__ = ["BASE_VERSION", "DIST_NAME", "compute_version", "__version__"]
