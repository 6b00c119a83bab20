"""Genes, gene panels and gene-centric data retrieval."""

import logging
import warnings
from typing import Any, Dict, Iterable, Optional, Union

import pandas as pd

from . import config
from .assemble import bind_rows, invoke_bind, invoke_paged, response_json
from .cache import get_cache, query_key
from .client import CBioPortal, invoke
from .errors import ConfigurationError, RemoteEmptyResult
from .molecular import molecular_data
from .samples import all_samples, samples_in_sample_lists
from .utils import as_list, match_arg, require_api, sample_mol_ids, sorted_ids

logger = logging.getLogger(__name__)


def gene_table(
    api: CBioPortal,
    page_size: int = 1000,
    page_number: Optional[int] = 0,
    **params: Any,
) -> pd.DataFrame:
    """
    Table of genes with Entrez IDs and Hugo symbols.

    Args:
        api: Client handle
        page_size: Rows per page
        page_number: Page to return; None fetches every page
        **params: Additional query parameters of 'getAllGenesUsingGET'

    Returns:
        Gene table
    """
    require_api(api)
    if page_number is None:
        return invoke_paged(api, "getAllGenesUsingGET", page_size, True, **params)
    return invoke_bind(
        api, "getAllGenesUsingGET", True, pageSize=page_size, pageNumber=page_number, **params
    )


def gene_panels(api: CBioPortal) -> pd.DataFrame:
    """All available gene panels."""
    require_api(api)
    return invoke_bind(api, "getAllGenePanelsUsingGET", False)


def get_gene_panel(api: CBioPortal, gene_panel_id: str) -> pd.DataFrame:
    """Genes of one gene panel (Entrez ID and Hugo symbol)."""
    require_api(api)
    response = invoke(api, "getGenePanelUsingGET", False, genePanelId=gene_panel_id)
    payload = response_json(response)
    if not isinstance(payload, dict) or "message" in payload:
        message = payload.get("message") if isinstance(payload, dict) else None
        warnings.warn(
            message or f"No data found for genePanelId: {gene_panel_id}",
            RemoteEmptyResult,
            stacklevel=2,
        )
        return pd.DataFrame()
    return bind_rows(payload.get("genes") or [])


def gene_panel_molecular(
    api: CBioPortal,
    molecular_profile_id: str,
    sample_list_id: Optional[str] = None,
    sample_ids: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """Gene panel assignments of samples in one molecular profile."""
    require_api(api)
    if sample_list_id is not None:
        return invoke_bind(
            api,
            "getGenePanelDataUsingPOST",
            False,
            molecularProfileId=molecular_profile_id,
            sampleListId=sample_list_id,
        )
    if sample_ids is not None:
        return invoke_bind(
            api,
            "getGenePanelDataUsingPOST",
            False,
            molecularProfileId=molecular_profile_id,
            sampleIds=sorted_ids(sample_ids),
        )
    raise ConfigurationError("Provide either 'sample_ids' or a 'sample_list_id'")


def get_gene_panel_molecular(
    api: CBioPortal,
    molecular_profile_ids: Union[str, Iterable[str]],
    sample_ids: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """Gene panel assignments for every profile x sample combination."""
    require_api(api)
    if sample_ids is None:
        raise ConfigurationError(
            "Provide valid 'sample_ids' from 'samples_in_sample_lists()' or 'all_samples()'"
        )
    return invoke_bind(
        api,
        "fetchGenePanelDataInMultipleMolecularProfilesUsingPOST",
        False,
        sampleMolecularIdentifiers=sample_mol_ids(molecular_profile_ids, sample_ids),
    )


def resolve_features(
    api: CBioPortal,
    by: str,
    genes: Optional[Iterable[Union[int, str]]] = None,
    gene_panel_id: Optional[str] = None,
) -> pd.DataFrame:
    """
    Gene metadata for the requested genes or gene panel.

    Genes are looked up by Entrez ID or Hugo symbol (``by``), so the result
    always carries ``entrezGeneId`` and, when the service knows it,
    ``hugoGeneSymbol``. Without genes, the members of ``gene_panel_id`` are used.

    Args:
        api: Client handle
        by: 'entrezGeneId' or 'hugoGeneSymbol'
        genes: Gene identifiers of type ``by``
        gene_panel_id: Gene panel identifier

    Returns:
        Gene metadata table
    """
    genes = as_list(genes)
    if not genes and not gene_panel_id:
        raise ConfigurationError("Provide either 'genes' or 'gene_panel_id'")
    by = match_arg(by, tuple(config.GENE_ID_TYPES), "by")

    if not genes:
        feats = get_gene_panel(api, gene_panel_id)
    else:
        lookup = invoke_bind(
            api,
            "fetchGenesUsingPOST",
            True,
            geneIdType=config.GENE_ID_TYPES[by],
            geneIds=sorted({str(g) for g in genes}),
        )
        if by == "entrezGeneId":
            # every requested ID is queried, with or without metadata
            requested = sorted({int(g) for g in genes})
            feats = pd.DataFrame({"entrezGeneId": requested})
            known = set()
            if "entrezGeneId" in lookup.columns:
                lookup = lookup.astype({"entrezGeneId": "int64"})
                lookup = lookup.drop_duplicates("entrezGeneId")
                feats = feats.merge(lookup, on="entrezGeneId", how="left")
                known = set(lookup["entrezGeneId"])
            missing = [g for g in requested if g not in known]
        else:
            feats = lookup
            known = set(lookup["hugoGeneSymbol"]) if "hugoGeneSymbol" in lookup.columns else set()
            missing = sorted({str(g) for g in genes} - known)
        if missing:
            warnings.warn(
                f"No gene metadata found for {by}: {', '.join(map(str, missing))}",
                RemoteEmptyResult,
                stacklevel=2,
            )

    if "entrezGeneId" in feats.columns:
        feats["entrezGeneId"] = feats["entrezGeneId"].astype("int64")
        feats = feats.drop_duplicates("entrezGeneId").reset_index(drop=True)
    return feats


def _join_features(table: pd.DataFrame, feats: pd.DataFrame) -> pd.DataFrame:
    if table.empty or "entrezGeneId" not in table.columns or "entrezGeneId" not in feats.columns:
        return table
    columns = [c for c in feats.columns if c == "entrezGeneId" or c not in table.columns]
    return table.merge(feats[columns], on="entrezGeneId", how="left")


def get_data_by_genes(
    api: CBioPortal,
    study_id: Optional[str] = None,
    genes: Optional[Iterable[Union[int, str]]] = None,
    gene_panel_id: Optional[str] = None,
    by: str = "entrezGeneId",
    molecular_profile_ids: Optional[Union[str, Iterable[str]]] = None,
    sample_list_id: Optional[str] = None,
    sample_ids: Optional[Iterable[str]] = None,
    cache=None,
) -> Dict[str, pd.DataFrame]:
    """
    Molecular data for a set of genes, one table per molecular profile.

    Samples come from ``sample_ids``, else from ``sample_list_id``, else all
    samples of ``study_id``. Genes come from ``genes`` (of identifier type
    ``by``) or from ``gene_panel_id``. Each profile's table is left-joined
    with the gene metadata. Results are cached by the resolved query.

    Args:
        api: Client handle
        study_id: Study identifier
        genes: Entrez gene IDs or Hugo symbols
        gene_panel_id: Gene panel identifier, used when no genes are given
        by: 'entrezGeneId' or 'hugoGeneSymbol'
        molecular_profile_ids: Profile ID(s) to query
        sample_list_id: Sample list identifier
        sample_ids: Sample IDs
        cache: Result cache (default: the on-disk cache)

    Returns:
        Mapping of profile ID to table
    """
    require_api(api)
    by = match_arg(by, tuple(config.GENE_ID_TYPES), "by")
    profile_ids = sorted_ids(molecular_profile_ids)
    if not profile_ids:
        raise ConfigurationError("Provide 'molecular_profile_ids'")

    if sample_ids is None and sample_list_id is not None:
        sample_ids = samples_in_sample_lists(api, sample_list_id)[sample_list_id]
    elif sample_ids is None:
        if not study_id:
            raise ConfigurationError(
                "Provide a 'study_id', a 'sample_list_id' or 'sample_ids'"
            )
        samples = all_samples(api, study_id)
        sample_ids = samples["sampleId"].tolist() if "sampleId" in samples.columns else []
    sample_ids = sorted_ids(sample_ids)

    feats = resolve_features(api, by, genes, gene_panel_id)

    cache = cache if cache is not None else get_cache()
    key = query_key("getDataByGenes", api, study_id, feats, sample_ids, profile_ids)
    mol_data = cache.get(key)
    if mol_data is not None:
        return mol_data

    entrez_ids = feats["entrezGeneId"].tolist() if "entrezGeneId" in feats.columns else []
    mol_data = molecular_data(api, profile_ids, entrez_ids, sample_ids)
    mol_data = {
        profile_id: _join_features(table, feats) for profile_id, table in mol_data.items()
    }
    logger.debug(f"getDataByGenes: {sum(len(t) for t in mol_data.values())} rows")
    cache.put(key, mol_data)
    return mol_data
