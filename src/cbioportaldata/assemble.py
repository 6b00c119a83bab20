"""
Response parsing and table assembly.

Every API response is read into one of three shapes:

* ``Rows``: a table of one or more records
* ``RemoteError``: the service answered with an error object (``message``)
* ``Empty``: no records at all

Query functions switch on that shape instead of probing fields, and always
receive a table (possibly empty) rather than a parse exception.
"""

import json
import logging
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Union

import pandas as pd

from .client import CBioPortal, invoke
from .errors import RemoteEmptyResult
from .utils import sorted_ids

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Rows:
    table: pd.DataFrame


@dataclass(frozen=True)
class RemoteError:
    message: str
    status_code: int = 200

    @property
    def table(self) -> pd.DataFrame:
        return pd.DataFrame()


@dataclass(frozen=True)
class Empty:
    payload: Any = field(default=None, repr=False)

    @property
    def table(self) -> pd.DataFrame:
        return pd.DataFrame()


Result = Union[Rows, RemoteError, Empty]


def bind_rows(rows: Iterable[Any]) -> pd.DataFrame:
    """
    Flatten records into one table.

    Columns are the union over all records; a record lacking a column gets
    NaN there. Nested objects become dotted columns (e.g. ``gene.hugoGeneSymbol``).

    Args:
        rows: Records as returned by the API

    Returns:
        DataFrame with one row per record
    """
    rows = list(rows)
    if not rows:
        return pd.DataFrame()
    if not all(isinstance(r, dict) for r in rows):
        return pd.DataFrame({"value": rows})
    return pd.json_normalize(rows)


def parse_payload(payload: Any, status_code: int = 200) -> Result:
    """Classify a decoded JSON payload."""
    if isinstance(payload, dict):
        if "message" in payload:
            return RemoteError(str(payload["message"]), status_code)
        return Rows(bind_rows([payload]))
    if isinstance(payload, list):
        if not payload:
            return Empty(payload)
        return Rows(bind_rows(payload))
    if payload is None:
        return Empty()
    return Rows(pd.DataFrame({"value": [payload]}))


def parse_response(response: Any) -> Result:
    """
    Read a transport response into ``Rows``, ``RemoteError`` or ``Empty``.

    Args:
        response: Response with ``status_code`` and ``content``

    Returns:
        Parsed result
    """
    status = getattr(response, "status_code", 200)
    content = response.content or b""
    if not content.strip():
        if status >= 400:
            return RemoteError(f"HTTP {status}", status)
        return Empty()
    try:
        payload = json.loads(content)
    except ValueError:
        return RemoteError(f"HTTP {status}: response is not valid JSON", status)
    result = parse_payload(payload, status)
    if status >= 400 and not isinstance(result, RemoteError):
        return RemoteError(f"HTTP {status}", status)
    return result


def invoke_result(
    api: CBioPortal, name: str, use_cache: bool = False, **params: Any
) -> Result:
    """Call an operation and parse its response."""
    return parse_response(invoke(api, name, use_cache, **params))


def invoke_bind(
    api: CBioPortal, name: str, use_cache: bool = False, **params: Any
) -> pd.DataFrame:
    """
    Call an operation and return its records as a table.

    An error payload or an empty response both give an empty table; callers
    that need the remote message should use :func:`invoke_result`.
    """
    result = invoke_result(api, name, use_cache, **params)
    if isinstance(result, RemoteError):
        logger.debug(f"{name} returned an error payload: {result.message}")
    return result.table


def invoke_paged(
    api: CBioPortal,
    name: str,
    page_size: int = 1000,
    use_cache: bool = False,
    **params: Any,
) -> pd.DataFrame:
    """
    Fetch every page of a paginated operation and concatenate them.

    Pages are requested from ``pageNumber=0`` until one comes back shorter
    than ``page_size``.
    """
    frames: List[pd.DataFrame] = []
    page_number = 0
    while True:
        result = invoke_result(
            api, name, use_cache, pageSize=page_size, pageNumber=page_number, **params
        )
        if not isinstance(result, Rows):
            break
        frames.append(result.table)
        if len(result.table) < page_size:
            break
        page_number += 1
    logger.debug(f"{name}: {page_number + 1} page(s) requested")
    if not frames:
        return pd.DataFrame()
    return pd.concat(frames, ignore_index=True, sort=False)


def split_by_profile(
    result: Result, molecular_profile_ids: Iterable[str]
) -> Dict[str, pd.DataFrame]:
    """
    Partition a result into one table per requested molecular profile.

    Every requested profile gets an entry; profiles without rows get an
    empty table and a :class:`RemoteEmptyResult` warning.

    Args:
        result: Parsed response of a single- or multi-profile fetch
        molecular_profile_ids: Requested profile IDs

    Returns:
        Mapping of profile ID to table, in sorted profile order
    """
    profile_ids = sorted_ids(molecular_profile_ids)
    if isinstance(result, RemoteError):
        warnings.warn(result.message, RemoteEmptyResult, stacklevel=2)
        return {pid: pd.DataFrame() for pid in profile_ids}

    table = result.table
    if table.empty or "molecularProfileId" not in table.columns:
        warnings.warn(
            f"No data found for molecularProfileId: {', '.join(profile_ids)}",
            RemoteEmptyResult,
            stacklevel=2,
        )
        return {pid: pd.DataFrame() for pid in profile_ids}

    groups = {
        key: frame.reset_index(drop=True)
        for key, frame in table.groupby("molecularProfileId", sort=True)
    }
    split: Dict[str, pd.DataFrame] = {}
    missing = []
    for profile_id in profile_ids:
        if profile_id in groups:
            split[profile_id] = groups[profile_id]
        else:
            split[profile_id] = table.iloc[0:0].reset_index(drop=True)
            missing.append(profile_id)
    if missing:
        warnings.warn(
            f"No data found for molecularProfileId: {', '.join(missing)}",
            RemoteEmptyResult,
            stacklevel=2,
        )
    return split


def response_json(response: Any) -> Any:
    """Decoded JSON body of a response, or None when there is none."""
    content = response.content or b""
    if not content.strip():
        return None
    try:
        return json.loads(content)
    except ValueError:
        return None
