"""Tests for query keys and result caches."""

import pandas as pd
import pandas.testing as pdt

from cbioportaldata.cache import BlobCache, DiskCache, MemoryCache, query_key


class TestQueryKey:
    def test_stable(self, api):
        assert query_key("clinicalData", api, "acc_tcga") == query_key(
            "clinicalData", api, "acc_tcga"
        )

    def test_list_order_does_not_matter(self, api):
        first = query_key("getDataByGenes", api, "acc_tcga", ["S2", "S1"], ["p_b", "p_a"])
        second = query_key("getDataByGenes", api, "acc_tcga", ["S1", "S2"], ["p_a", "p_b"])

        assert first == second

    def test_table_row_order_does_not_matter(self, api):
        feats = pd.DataFrame({"entrezGeneId": [1, 2], "hugoGeneSymbol": ["A1BG", "A2M"]})

        assert query_key("f", api, feats) == query_key("f", api, feats.iloc[::-1])

    def test_arguments_change_the_key(self, api):
        assert query_key("clinicalData", api, "acc_tcga") != query_key(
            "clinicalData", api, "brca_tcga"
        )
        assert query_key("clinicalData", api, "acc_tcga") != query_key(
            "molecularData", api, "acc_tcga"
        )

    def test_client_identity_is_part_of_the_key(self, api):
        from dataclasses import replace

        other = replace(api, hostname="genie.cbioportal.org")

        assert query_key("clinicalData", api, "x") != query_key("clinicalData", other, "x")


class TestMemoryCache:
    def test_round_trip(self):
        cache = MemoryCache()
        table = pd.DataFrame({"patientId": ["P1"], "AGE": ["58"]})

        cache.put("k", table)

        pdt.assert_frame_equal(cache.get("k"), table)
        assert "k" in cache

    def test_miss(self):
        assert MemoryCache().get("missing") is None

    def test_clear(self):
        cache = MemoryCache()
        cache.put("k", 1)
        cache.clear()

        assert len(cache) == 0


class TestDiskCache:
    def test_round_trip(self, tmp_path):
        cache = DiskCache(BlobCache(tmp_path))
        tables = {"acc_tcga_rppa": pd.DataFrame({"sampleId": ["S1"], "value": [0.5]})}

        cache.put("abc", tables)
        restored = cache.get("abc")

        assert list(restored) == ["acc_tcga_rppa"]
        pdt.assert_frame_equal(restored["acc_tcga_rppa"], tables["acc_tcga_rppa"])

    def test_miss_and_clear(self, tmp_path):
        blobs = BlobCache(tmp_path / "results")
        cache = DiskCache(blobs)

        assert cache.get("abc") is None
        cache.put("abc", pd.DataFrame())
        assert blobs.key_to_path("abc").exists()

        cache.clear()
        assert "abc" not in cache

    def test_key_to_path(self, tmp_path):
        assert BlobCache(tmp_path).key_to_path("deadbeef") == tmp_path / "deadbeef.pkl"
