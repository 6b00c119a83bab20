"""Tests for study listing."""

import pandas as pd

from cbioportaldata.studies import get_studies


def test_citation_columns_are_always_present(api, transport):
    transport.add(
        "GET",
        "/api/studies",
        [
            {"studyId": "acc_tcga", "name": "Adrenocortical Carcinoma (TCGA)"},
            {"studyId": "brca_tcga_pub", "name": "Breast (TCGA 2012)", "pmid": "23000897"},
        ],
    )

    studies = get_studies(api)

    assert studies["studyId"].tolist() == ["acc_tcga", "brca_tcga_pub"]
    assert pd.isna(studies.loc[0, "pmid"])
    assert studies.loc[1, "pmid"] == "23000897"
    assert studies["citation"].isna().all()


def test_error_payload_gives_empty_table_with_columns(api, transport):
    transport.add("GET", "/api/studies", {"message": "Service unavailable"})

    studies = get_studies(api)

    assert studies.empty
    assert {"pmid", "citation"} <= set(studies.columns)
