"""Tests for identifier helpers."""

import numpy as np
import pandas as pd
import pytest

from cbioportaldata.errors import ConfigurationError
from cbioportaldata.utils import (
    as_list,
    is_mutation_profile,
    match_arg,
    sample_mol_ids,
    sorted_ids,
    to_jsonable,
)


class TestSampleMolIds:
    def test_profile_major_order(self):
        pairs = sample_mol_ids(["acc_tcga_rppa", "acc_tcga_gistic"], ["S2", "S1"])

        assert pairs == [
            {"molecularProfileId": "acc_tcga_gistic", "sampleId": "S1"},
            {"molecularProfileId": "acc_tcga_gistic", "sampleId": "S2"},
            {"molecularProfileId": "acc_tcga_rppa", "sampleId": "S1"},
            {"molecularProfileId": "acc_tcga_rppa", "sampleId": "S2"},
        ]

    def test_permuted_input_gives_identical_output(self):
        profiles = ["p3", "p1", "p2"]
        samples = ["TCGA-OR-A5J3-01", "TCGA-OR-A5J1-01", "TCGA-OR-A5J2-01"]

        expected = sample_mol_ids(sorted(profiles), sorted(samples))

        assert sample_mol_ids(profiles, samples) == expected
        assert sample_mol_ids(profiles[::-1], samples[::-1]) == expected

    def test_single_profile_string(self):
        assert sample_mol_ids("p1", ["S1"]) == [{"molecularProfileId": "p1", "sampleId": "S1"}]


def test_as_list():
    assert as_list(None) == []
    assert as_list("acc_tcga") == ["acc_tcga"]
    assert as_list(7157) == [7157]
    assert as_list(pd.Series([1, 2])) == [1, 2]
    assert as_list(("a", "b")) == ["a", "b"]


def test_sorted_ids_dedups():
    assert sorted_ids(["b", "a", "b"]) == ["a", "b"]


def test_is_mutation_profile():
    assert is_mutation_profile("acc_tcga_mutations")
    assert not is_mutation_profile("acc_tcga_rppa")


def test_match_arg():
    assert match_arg("ID", ("SUMMARY", "ID"), "projection") == "ID"
    with pytest.raises(ConfigurationError, match="projection"):
        match_arg("FULL", ("SUMMARY", "ID"), "projection")


def test_to_jsonable():
    value = {"ids": np.array([1, 2]), "n": np.int64(3), "pairs": ({"a": np.float64(0.5)},)}

    assert to_jsonable(value) == {"ids": [1, 2], "n": 3, "pairs": [{"a": 0.5}]}
