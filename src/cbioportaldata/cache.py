"""Result cache keyed by query identity.

Results are looked up by a digest of the function name, the client identity
and the fully resolved arguments. Entries are never invalidated; clear the
store to pick up remote changes.
"""

import hashlib
import json
import logging
import math
import pickle
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import pandas as pd

from . import config

logger = logging.getLogger(__name__)


def _sort_key(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def _canonical(value: Any) -> Any:
    """Render a value as JSON-compatible data with order-free collections."""
    if isinstance(value, pd.DataFrame):
        records = value.astype(object).where(value.notna(), None).to_dict(orient="records")
        return sorted((_canonical(r) for r in records), key=_sort_key)
    if isinstance(value, (pd.Series, pd.Index, np.ndarray)):
        value = value.tolist()
    if hasattr(value, "identity") and callable(value.identity):
        return _canonical(value.identity())
    if isinstance(value, dict):
        return {str(k): _canonical(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return sorted((_canonical(v) for v in value), key=_sort_key)
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, Path):
        return str(value)
    return value


def query_key(name: str, *args: Any) -> str:
    """
    Compute the cache key of a query.

    Args:
        name: Function or operation name
        *args: Client handle and resolved arguments, in call order

    Returns:
        Hex digest, stable under reordering of list arguments
    """
    payload = json.dumps(
        [name] + [_canonical(a) for a in args], sort_keys=True, default=str
    )
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


class BlobCache:
    """Opaque pickled blobs stored under a directory, one file per key."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory).expanduser()

    def key_to_path(self, key: str) -> Path:
        return self.directory / f"{key}.pkl"

    def exists(self, key: str) -> bool:
        return self.key_to_path(key).exists()

    def read(self, key: str) -> Any:
        with open(self.key_to_path(key), "rb") as handle:
            return pickle.load(handle)

    def write(self, key: str, value: Any) -> Path:
        path = self.key_to_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as handle:
            pickle.dump(value, handle, protocol=pickle.HIGHEST_PROTOCOL)
        return path

    def clear(self) -> None:
        if not self.directory.exists():
            return
        for path in self.directory.glob("*.pkl"):
            path.unlink()


class MemoryCache:
    """In-process result cache."""

    def __init__(self):
        self._store: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._store.get(key)

    def put(self, key: str, value: Any) -> None:
        self._store[key] = value

    def clear(self) -> None:
        self._store.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)


class DiskCache:
    """Result cache persisted through a :class:`BlobCache`."""

    def __init__(self, blobs: Optional[BlobCache] = None):
        self.blobs = blobs if blobs is not None else BlobCache(config.CACHE_DIR)

    def get(self, key: str) -> Optional[Any]:
        if not self.blobs.exists(key):
            return None
        logger.info(f"Loading cached result {key}")
        return self.blobs.read(key)

    def put(self, key: str, value: Any) -> None:
        self.blobs.write(key, value)

    def clear(self) -> None:
        self.blobs.clear()

    def __contains__(self, key: str) -> bool:
        return self.blobs.exists(key)


# Process-wide default store
_result_cache = None


def get_cache() -> DiskCache:
    """Get or create the default on-disk result cache."""
    global _result_cache
    if _result_cache is None:
        _result_cache = DiskCache(BlobCache(config.CACHE_DIR / "results"))
    return _result_cache
