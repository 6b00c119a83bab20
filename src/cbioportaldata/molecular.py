"""Molecular profiles and molecular (expression, copy-number, ...) data."""

import logging
import warnings
from typing import Any, Dict, Iterable, Optional, Union

import pandas as pd

from . import config
from .assemble import invoke_result, parse_response, response_json, split_by_profile
from .client import CBioPortal, invoke
from .errors import ConfigurationError, RemoteEmptyResult
from .mutations import mutation_data
from .utils import is_mutation_profile, match_arg, require_api, sample_mol_ids, sorted_ids

logger = logging.getLogger(__name__)


def molecular_profiles(
    api: CBioPortal, study_id: str, projection: str = "SUMMARY"
) -> Union[pd.DataFrame, Any]:
    """
    Molecular profiles of a study.

    Args:
        api: Client handle
        study_id: Study identifier
        projection: One of SUMMARY, ID, DETAILED, META

    Returns:
        A table for SUMMARY/ID projections; the decoded JSON (nested lists
        and dicts) for DETAILED/META
    """
    require_api(api)
    projection = match_arg(projection, config.PROJECTIONS, "projection")
    response = invoke(
        api,
        "getAllMolecularProfilesInStudyUsingGET",
        use_cache=False,
        studyId=study_id,
        projection=projection,
    )
    if projection in ("SUMMARY", "ID"):
        return parse_response(response).table
    payload = response_json(response)
    if isinstance(payload, dict) and "message" in payload:
        warnings.warn(payload["message"], RemoteEmptyResult, stacklevel=2)
        return []
    if payload is None:
        # META answers with headers only; anything else unreadable is reported
        if response.status_code >= 400 or (response.content or b"").strip():
            warnings.warn(
                f"Unreadable molecular profiles response for studyId: {study_id}",
                RemoteEmptyResult,
                stacklevel=2,
            )
        return []
    return payload


def molecular_data(
    api: CBioPortal,
    molecular_profile_ids: Union[str, Iterable[str]],
    entrez_gene_ids: Optional[Iterable[int]] = None,
    sample_ids: Optional[Iterable[str]] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Molecular data for genes and samples across molecular profiles.

    Mutation profiles (IDs containing 'mutation') are delegated to
    :func:`mutation_data`. The remaining profiles use the single-profile
    endpoint when there is one of them, otherwise one multi-profile request
    with the SUMMARY projection.

    Every requested profile is a key of the result; profiles without data map
    to an empty table and raise a ``RemoteEmptyResult`` warning.

    Args:
        api: Client handle
        molecular_profile_ids: Profile ID(s)
        entrez_gene_ids: Entrez gene IDs
        sample_ids: Sample IDs

    Returns:
        Mapping of profile ID to data table, in sorted profile order
    """
    require_api(api)
    if entrez_gene_ids is None:
        raise ConfigurationError("Provide a list of 'entrez_gene_ids'")
    if sample_ids is None:
        raise ConfigurationError("Provide a list of 'sample_ids'")
    profile_ids = sorted_ids(molecular_profile_ids)
    if not profile_ids:
        raise ConfigurationError("Provide 'molecular_profile_ids'")

    mutation_ids = [p for p in profile_ids if is_mutation_profile(p)]
    other_ids = [p for p in profile_ids if not is_mutation_profile(p)]

    by_profile: Dict[str, pd.DataFrame] = {}
    if mutation_ids:
        by_profile.update(mutation_data(api, mutation_ids, entrez_gene_ids, sample_ids))

    if len(other_ids) == 1:
        result = invoke_result(
            api,
            "fetchAllMolecularDataInMolecularProfileUsingPOST",
            use_cache=False,
            molecularProfileId=other_ids[0],
            entrezGeneIds=sorted_ids(entrez_gene_ids),
            sampleIds=sorted_ids(sample_ids),
        )
        by_profile.update(split_by_profile(result, other_ids))
    elif other_ids:
        result = invoke_result(
            api,
            "fetchMolecularDataInMultipleMolecularProfilesUsingPOST",
            use_cache=False,
            projection="SUMMARY",
            entrezGeneIds=sorted_ids(entrez_gene_ids),
            sampleMolecularIdentifiers=sample_mol_ids(other_ids, sample_ids),
        )
        by_profile.update(split_by_profile(result, other_ids))

    return {profile_id: by_profile[profile_id] for profile_id in profile_ids}
