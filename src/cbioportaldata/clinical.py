"""Clinical data retrieval."""

import logging
from typing import List, Optional

import pandas as pd

from .assemble import invoke_bind
from .cache import get_cache, query_key
from .client import CBioPortal
from .errors import ConfigurationError
from .utils import require_api

logger = logging.getLogger(__name__)


def _pivot_wide(table: pd.DataFrame, id_cols: List[str]) -> pd.DataFrame:
    """One row per entity, one column per clinical attribute."""
    if table.empty or not {"clinicalAttributeId", "value", *id_cols} <= set(table.columns):
        return pd.DataFrame(columns=id_cols)
    wide = table.pivot_table(
        index=id_cols,
        columns="clinicalAttributeId",
        values="value",
        aggfunc="first",
    ).reset_index()
    wide.columns.name = None
    return wide


def clinical_data(api: CBioPortal, study_id: str, cache=None) -> pd.DataFrame:
    """
    Patient and sample clinical attributes of a study.

    Patient-level and sample-level attributes are fetched separately, pivoted
    wide and outer-joined on ``patientId``, so patients without samples are
    kept. Results are cached by study.

    Args:
        api: Client handle
        study_id: Study identifier, e.g. 'acc_tcga'
        cache: Result cache (default: the on-disk cache)

    Returns:
        DataFrame with one row per patient/sample combination
    """
    require_api(api)
    if not study_id:
        raise ConfigurationError("Provide a 'study_id'")
    cache = cache if cache is not None else get_cache()

    key = query_key("clinicalData", api, study_id)
    full: Optional[pd.DataFrame] = cache.get(key)
    if full is not None:
        return full

    patients = invoke_bind(
        api,
        "fetchAllClinicalDataInStudyUsingPOST",
        use_cache=False,
        clinicalDataType="PATIENT",
        studyId=study_id,
    )
    patient_table = _pivot_wide(patients, ["patientId"])
    samples = invoke_bind(
        api, "getAllClinicalDataInStudyUsingGET", use_cache=False, studyId=study_id
    )
    sample_table = _pivot_wide(samples, ["patientId", "sampleId"])

    full = patient_table.merge(sample_table, on="patientId", how="outer")
    logger.debug(f"clinicalData({study_id}): {len(full)} rows, {full.shape[1]} columns")
    cache.put(key, full)
    return full
