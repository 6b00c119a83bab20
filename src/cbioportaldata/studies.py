"""Study listing."""

import numpy as np
import pandas as pd

from .assemble import invoke_bind
from .client import CBioPortal
from .utils import require_api


def get_studies(api: CBioPortal) -> pd.DataFrame:
    """
    Table of all studies and their metadata.

    The ``pmid`` and ``citation`` columns are always present, NaN where a
    study has none.
    """
    require_api(api)
    studies = invoke_bind(api, "getAllStudiesUsingGET")
    for column in ("pmid", "citation"):
        if column not in studies.columns:
            studies[column] = np.nan
    return studies
