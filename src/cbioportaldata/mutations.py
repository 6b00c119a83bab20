"""Mutation data retrieval."""

import logging
from typing import Dict, Iterable, Optional, Union

import pandas as pd

from .assemble import invoke_result, split_by_profile
from .client import CBioPortal
from .errors import ConfigurationError
from .utils import require_api, sample_mol_ids, sorted_ids, sorted_or_none

logger = logging.getLogger(__name__)


def mutation_data(
    api: CBioPortal,
    molecular_profile_ids: Union[str, Iterable[str]],
    entrez_gene_ids: Optional[Iterable[int]] = None,
    sample_ids: Optional[Iterable[str]] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Mutations for genes and samples in one or more mutation profiles.

    A single profile is fetched through the single-profile endpoint; several
    profiles go through one multi-profile request built from the
    profile x sample cross product. Profiles without data get an empty table
    and a ``RemoteEmptyResult`` warning.

    Args:
        api: Client handle
        molecular_profile_ids: Mutation profile ID(s)
        entrez_gene_ids: Entrez gene IDs
        sample_ids: Sample IDs

    Returns:
        Mapping of every requested profile ID to its mutation table
    """
    require_api(api)
    profile_ids = sorted_ids(molecular_profile_ids)
    if not profile_ids:
        raise ConfigurationError("Provide 'molecular_profile_ids'")

    if len(profile_ids) == 1:
        result = invoke_result(
            api,
            "fetchMutationsInMolecularProfileUsingPOST",
            use_cache=False,
            molecularProfileId=profile_ids[0],
            entrezGeneIds=sorted_or_none(entrez_gene_ids),
            sampleIds=sorted_or_none(sample_ids),
        )
    else:
        if sample_ids is None:
            raise ConfigurationError(
                "Provide 'sample_ids' when querying several molecular profiles"
            )
        result = invoke_result(
            api,
            "fetchMutationsInMultipleMolecularProfilesUsingPOST",
            use_cache=False,
            entrezGeneIds=sorted_or_none(entrez_gene_ids),
            sampleMolecularIdentifiers=sample_mol_ids(profile_ids, sample_ids),
        )
    logger.debug(f"mutationData: {type(result).__name__} for {profile_ids}")
    return split_by_profile(result, profile_ids)
