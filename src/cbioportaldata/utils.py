"""Utility functions for cBioPortal identifiers and payloads."""

from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from .errors import ConfigurationError


def require_api(api: Any) -> None:
    """Raise unless an API handle was supplied."""
    if api is None:
        raise ConfigurationError("Provide a valid 'api' from 'cbioportal()'")


def as_list(values: Optional[Union[str, int, Iterable[Any]]]) -> List[Any]:
    """
    Normalize a scalar or collection argument to a list.

    Args:
        values: None, a single identifier or an iterable of identifiers

    Returns:
        List of identifiers (empty for None)
    """
    if values is None:
        return []
    if isinstance(values, (str, bytes, int, np.integer)):
        return [values]
    if isinstance(values, (pd.Series, pd.Index, np.ndarray)):
        return values.tolist()
    return list(values)


def sorted_ids(values: Optional[Union[str, Iterable[Any]]]) -> List[Any]:
    """Sorted, de-duplicated identifiers."""
    return sorted(set(as_list(values)))


def sample_mol_ids(
    molecular_profile_ids: Iterable[str], sample_ids: Iterable[str]
) -> List[Dict[str, str]]:
    """
    Cross product of profile and sample identifiers.

    Both lists are sorted first; pairs are ordered by profile, with the
    sample varying within each profile.

    Args:
        molecular_profile_ids: Molecular profile IDs
        sample_ids: Sample IDs

    Returns:
        List of ``{"molecularProfileId", "sampleId"}`` pairs
    """
    return [
        {"molecularProfileId": profile_id, "sampleId": sample_id}
        for profile_id in sorted_ids(molecular_profile_ids)
        for sample_id in sorted_ids(sample_ids)
    ]


def is_mutation_profile(molecular_profile_id: str) -> bool:
    return "mutation" in molecular_profile_id


def to_jsonable(value: Any) -> Any:
    """Convert numpy/pandas values into plain JSON-serializable data."""
    if isinstance(value, pd.DataFrame):
        return [to_jsonable(r) for r in value.to_dict(orient="records")]
    if isinstance(value, (pd.Series, pd.Index, np.ndarray)):
        return [to_jsonable(v) for v in value.tolist()]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, np.generic):
        return value.item()
    return value


def sorted_or_none(values: Optional[Union[str, Iterable[Any]]]) -> Optional[List[Any]]:
    """Like :func:`sorted_ids`, but keeps None (an omitted argument) as None."""
    return None if values is None else sorted_ids(values)


def match_arg(value: str, choices: Iterable[str], name: str) -> str:
    """Validate a choice argument."""
    choices = tuple(choices)
    if value not in choices:
        raise ConfigurationError(
            f"'{name}' must be one of {', '.join(choices)}; got {value!r}"
        )
    return value
