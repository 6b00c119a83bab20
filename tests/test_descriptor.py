"""Tests for API descriptor parsing and loading."""

import hashlib

import pytest

from cbioportaldata.descriptor import Registry, load_descriptor
from cbioportaldata.errors import (
    IntegrityError,
    TransportError,
    UnavailableError,
    UnknownOperationError,
)
from conftest import FakeResponse, FakeTransport

DOCS_URL = "https://www.cbioportal.org/api/api-docs"


class TestRegistry:
    def test_operations_are_indexed_by_id(self, registry):
        assert "getAllStudiesUsingGET" in registry
        assert len(registry) == 18
        assert registry.base_path == "/api"

    def test_descriptor_fields(self, registry):
        op = registry["fetchMutationsInMolecularProfileUsingPOST"]
        assert op.method == "POST"
        assert op.path == "/molecular-profiles/{molecularProfileId}/mutations/fetch"
        assert op.tag == "Mutations"
        assert [p.name for p in op.params_in("path")] == ["molecularProfileId"]
        assert op.params_in("path")[0].required is True
        assert [p.name for p in op.params_in("query")] == ["projection"]

    def test_body_schema_is_dereferenced(self, registry):
        body = registry["fetchMolecularDataInMultipleMolecularProfilesUsingPOST"].body_param
        assert body.name == "molecularDataMultipleStudyFilter"
        assert body.type == "object"
        assert set(body.properties) == {
            "entrezGeneIds",
            "molecularProfileIds",
            "sampleMolecularIdentifiers",
        }

    def test_array_body(self, registry):
        body = registry["fetchGenesUsingPOST"].body_param
        assert body.name == "geneIds"
        assert body.type == "array"
        assert body.properties == ()

    def test_get_operations_have_no_body(self, registry):
        assert registry["getAllStudiesUsingGET"].body_param is None

    def test_unknown_operation(self, registry):
        with pytest.raises(UnknownOperationError, match="notAnOperation"):
            registry["notAnOperation"]

    def test_unknown_operation_is_a_key_error(self, registry):
        assert "notAnOperation" not in registry
        assert registry.get("notAnOperation") is None

    def test_search_is_case_insensitive(self, registry):
        found = registry.search("MOLECULARDATA")
        assert found == [
            "fetchAllMolecularDataInMolecularProfileUsingPOST",
            "fetchMolecularDataInMultipleMolecularProfilesUsingPOST",
        ]


class TestLoadDescriptor:
    def test_load_with_matching_checksum(self, api_docs_bytes):
        transport = FakeTransport()
        transport.add("GET", "/api/api-docs", FakeResponse(content=api_docs_bytes))
        checksum = hashlib.md5(api_docs_bytes).hexdigest()

        registry = load_descriptor(DOCS_URL, checksum, transport)

        assert isinstance(registry, Registry)
        assert "getGenePanelUsingGET" in registry
        assert len(transport.calls) == 1

    def test_checksum_mismatch_fails_without_further_calls(self, api_docs_bytes):
        transport = FakeTransport()
        transport.add("GET", "/api/api-docs", FakeResponse(content=api_docs_bytes))

        with pytest.raises(IntegrityError, match="expected 0+"):
            load_descriptor(DOCS_URL, "0" * 32, transport)

        assert len(transport.calls) == 1

    def test_no_checksum_skips_verification(self, api_docs_bytes):
        transport = FakeTransport()
        transport.add("GET", "/api/api-docs", FakeResponse(content=api_docs_bytes))

        registry = load_descriptor(DOCS_URL, None, transport)

        assert "fetchGenesUsingPOST" in registry

    def test_transport_failure_is_unavailable(self):
        class BrokenTransport:
            def send(self, *args, **kwargs):
                raise TransportError("connection refused")

        with pytest.raises(UnavailableError, match="connection refused"):
            load_descriptor(DOCS_URL, None, BrokenTransport())

    def test_http_error_is_unavailable(self):
        transport = FakeTransport()
        transport.add("GET", "/api/api-docs", FakeResponse({"message": "gone"}, status_code=404))

        with pytest.raises(UnavailableError, match="HTTP 404"):
            load_descriptor(DOCS_URL, None, transport)

    def test_headers_are_forwarded(self, api_docs_bytes):
        transport = FakeTransport()
        transport.add("GET", "/api/api-docs", FakeResponse(content=api_docs_bytes))

        load_descriptor(DOCS_URL, None, transport, headers={"Authorization": "Bearer x"})

        assert transport.calls[0].headers == {"Authorization": "Bearer x"}
