"""
cBioPortal API client.

Query studies, clinical data, molecular profiles and gene panels of a
cBioPortal instance and get the results back as pandas tables.
"""

from .cache import BlobCache, DiskCache, MemoryCache, get_cache, query_key
from .client import CBioPortal, cbioportal, handle_token, invoke, search_ops
from .assemble import invoke_bind, invoke_paged
from .clinical import clinical_data
from .descriptor import OperationDescriptor, ParamSpec, Registry, load_descriptor
from .errors import (
    CBioPortalError,
    ConfigurationError,
    IntegrityError,
    RemoteEmptyResult,
    TransportError,
    UnavailableError,
    UnknownOperationError,
)
from .genes import (
    gene_panel_molecular,
    gene_panels,
    gene_table,
    get_data_by_genes,
    get_gene_panel,
    get_gene_panel_molecular,
    resolve_features,
)
from .molecular import molecular_data, molecular_profiles
from .mutations import mutation_data
from .samples import (
    SampleListSamples,
    all_samples,
    get_sample_info,
    sample_lists,
    samples_in_sample_lists,
)
from .studies import get_studies
from .transport import RequestsTransport
from .utils import sample_mol_ids

__all__ = [
    "BlobCache",
    "CBioPortal",
    "CBioPortalError",
    "ConfigurationError",
    "DiskCache",
    "IntegrityError",
    "MemoryCache",
    "OperationDescriptor",
    "ParamSpec",
    "Registry",
    "RemoteEmptyResult",
    "RequestsTransport",
    "SampleListSamples",
    "TransportError",
    "UnavailableError",
    "UnknownOperationError",
    "all_samples",
    "cbioportal",
    "clinical_data",
    "gene_panel_molecular",
    "gene_panels",
    "gene_table",
    "get_cache",
    "get_data_by_genes",
    "get_gene_panel",
    "get_gene_panel_molecular",
    "get_sample_info",
    "get_studies",
    "handle_token",
    "invoke",
    "invoke_bind",
    "invoke_paged",
    "load_descriptor",
    "molecular_data",
    "molecular_profiles",
    "mutation_data",
    "query_key",
    "resolve_features",
    "sample_lists",
    "sample_mol_ids",
    "samples_in_sample_lists",
    "search_ops",
]
