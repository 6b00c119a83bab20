"""Samples and sample lists."""

import logging
import warnings
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Union

import pandas as pd

from . import config
from .assemble import bind_rows, invoke_bind, response_json
from .client import CBioPortal, invoke
from .errors import ConfigurationError, RemoteEmptyResult
from .utils import match_arg, require_api, sorted_ids

logger = logging.getLogger(__name__)


@dataclass
class SampleListSamples:
    """Sample IDs per sample list, with the lists' metadata alongside."""

    sample_ids: Dict[str, List[str]] = field(default_factory=dict)
    # one row per sample list, indexed by sampleListId
    metadata: pd.DataFrame = field(default_factory=pd.DataFrame)

    def __getitem__(self, sample_list_id: str) -> List[str]:
        return self.sample_ids[sample_list_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.sample_ids)

    def __len__(self) -> int:
        return len(self.sample_ids)


def samples_in_sample_lists(
    api: CBioPortal, sample_list_ids: Union[str, Iterable[str]]
) -> SampleListSamples:
    """
    Sample IDs contained in each sample list.

    Args:
        api: Client handle
        sample_list_ids: Sample list ID(s), e.g. 'acc_tcga_rppa'

    Returns:
        SampleListSamples keyed by sorted sample list ID
    """
    require_api(api)
    samples = SampleListSamples()
    meta_rows = []
    for sample_list_id in sorted_ids(sample_list_ids):
        response = invoke(api, "getSampleListUsingGET", False, sampleListId=sample_list_id)
        payload = response_json(response)
        if not isinstance(payload, dict) or "message" in payload:
            message = payload.get("message") if isinstance(payload, dict) else None
            warnings.warn(
                message or f"No data found for sampleListId: {sample_list_id}",
                RemoteEmptyResult,
                stacklevel=2,
            )
            samples.sample_ids[sample_list_id] = []
            continue
        samples.sample_ids[sample_list_id] = list(payload.get("sampleIds") or [])
        meta = {k: v for k, v in payload.items() if k != "sampleIds"}
        meta["sampleListId"] = sample_list_id
        meta_rows.append(meta)

    if meta_rows:
        samples.metadata = bind_rows(meta_rows).set_index("sampleListId")
    return samples


def sample_lists(api: CBioPortal, study_id: str) -> pd.DataFrame:
    """All sample lists of a study."""
    require_api(api)
    return invoke_bind(api, "getAllSampleListsInStudyUsingGET", False, studyId=study_id)


def all_samples(api: CBioPortal, study_id: str) -> pd.DataFrame:
    """All samples of a study."""
    require_api(api)
    return invoke_bind(api, "getAllSamplesInStudyUsingGET", False, studyId=study_id)


def get_sample_info(
    api: CBioPortal,
    study_id: Optional[str] = None,
    sample_list_ids: Optional[Union[str, Iterable[str]]] = None,
    projection: str = "SUMMARY",
) -> pd.DataFrame:
    """
    Sample metadata, either for sample lists or for every sample of a study.

    Args:
        api: Client handle
        study_id: Study identifier, used when no sample lists are given
        sample_list_ids: Sample list ID(s)
        projection: One of SUMMARY, ID, DETAILED, META

    Returns:
        Table of samples
    """
    require_api(api)
    projection = match_arg(projection, config.PROJECTIONS, "projection")
    if sample_list_ids is not None:
        return invoke_bind(
            api,
            "fetchSamplesUsingPOST",
            False,
            projection=projection,
            sampleListIds=sorted_ids(sample_list_ids),
        )

    if not study_id:
        raise ConfigurationError("Provide either a 'study_id' or 'sample_list_ids'")
    samples = all_samples(api, study_id)
    if samples.empty:
        warnings.warn(
            f"No samples found for studyId: {study_id}", RemoteEmptyResult, stacklevel=2
        )
        return pd.DataFrame()
    identifiers = (
        samples[["sampleId", "studyId"]]
        .sort_values(["studyId", "sampleId"])
        .to_dict(orient="records")
    )
    return invoke_bind(
        api,
        "fetchSamplesUsingPOST",
        False,
        projection=projection,
        sampleIdentifiers=identifiers,
    )
