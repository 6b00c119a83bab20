"""
API descriptor loading.

The cBioPortal service publishes a Swagger 2.0 document listing every
operation. It is downloaded once per client, checked against a known md5
digest and parsed with bravado-core into a registry of
:class:`OperationDescriptor` objects keyed by operation ID.
"""

import hashlib
import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from bravado_core.spec import Spec

from .errors import IntegrityError, TransportError, UnavailableError, UnknownOperationError

logger = logging.getLogger(__name__)

BRAVADO_CONFIG = {
    "validate_swagger_spec": False,
    "validate_requests": False,
    "validate_responses": False,
    "use_models": False,
}


@dataclass(frozen=True)
class ParamSpec:
    """One declared parameter of an operation."""

    name: str
    location: str
    required: bool = False
    type: Optional[str] = None
    # property names of the body schema, for body parameters
    properties: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OperationDescriptor:
    """HTTP verb, path template and parameters of one remote operation."""

    name: str
    method: str
    path: str
    params: Tuple[ParamSpec, ...] = ()
    tag: Optional[str] = None
    # bravado-core operation that builds the outgoing request
    operation: Any = field(default=None, compare=False, repr=False)

    def params_in(self, location: str) -> Tuple[ParamSpec, ...]:
        return tuple(p for p in self.params if p.location == location)

    @property
    def body_param(self) -> Optional[ParamSpec]:
        body = self.params_in("body")
        return body[0] if body else None


def _param_spec(spec: Spec, param: Any) -> ParamSpec:
    param_spec = spec.deref(param.param_spec)
    type_ = param_spec.get("type")
    properties: Tuple[str, ...] = ()
    if param.location == "body":
        schema = spec.deref(param_spec.get("schema") or {})
        type_ = schema.get("type", "object")
        properties = tuple(spec.deref(schema.get("properties") or {}))
    return ParamSpec(
        name=param.name,
        location=param.location,
        required=bool(param_spec.get("required", False)),
        type=type_,
        properties=properties,
    )


class Registry(Mapping):
    """Read-only mapping of operation ID to :class:`OperationDescriptor`."""

    def __init__(self, operations: Dict[str, OperationDescriptor], base_path: str = ""):
        self._operations = dict(operations)
        self.base_path = base_path.rstrip("/")

    def __getitem__(self, name: str) -> OperationDescriptor:
        try:
            return self._operations[name]
        except KeyError:
            raise UnknownOperationError(
                f"Operation '{name}' is not available in the API"
            ) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __repr__(self) -> str:
        return f"Registry(operations={len(self)}, base_path={self.base_path!r})"

    def search(self, keyword: str) -> List[str]:
        """Operation names matching ``keyword`` (regex, case-insensitive)."""
        pattern = re.compile(keyword, re.IGNORECASE)
        return sorted(name for name in self._operations if pattern.search(name))

    @classmethod
    def from_spec_dict(
        cls, spec_dict: Dict[str, Any], origin_url: Optional[str] = None
    ) -> "Registry":
        """Build a registry from a parsed Swagger 2.0 document."""
        spec = Spec.from_dict(spec_dict, origin_url=origin_url or "", config=BRAVADO_CONFIG)
        operations = {}
        for tag, resource in sorted(spec.resources.items()):
            for operation in resource.operations.values():
                operations[operation.operation_id] = OperationDescriptor(
                    name=operation.operation_id,
                    method=operation.http_method.upper(),
                    path=operation.path_name,
                    params=tuple(
                        _param_spec(spec, p) for p in operation.params.values()
                    ),
                    tag=tag,
                    operation=operation,
                )
        return cls(operations, base_path=spec_dict.get("basePath", ""))


def load_descriptor(
    reference_url: str,
    expected_checksum: Optional[str],
    transport: Any,
    headers: Optional[Dict[str, str]] = None,
) -> Registry:
    """
    Download, verify and parse the API descriptor.

    Args:
        reference_url: URL of the Swagger document
        expected_checksum: md5 hex digest the document must match, or None
            to skip verification
        transport: Object with a ``send`` method (see ``RequestsTransport``)
        headers: Extra headers, e.g. the authorization header

    Returns:
        Registry of all operations

    Raises:
        UnavailableError: The document could not be downloaded
        IntegrityError: The document does not match ``expected_checksum``
    """
    try:
        response = transport.send("GET", reference_url, headers=headers)
    except TransportError as exc:
        raise UnavailableError(
            f"Could not download the API descriptor from {reference_url}: {exc}"
        ) from exc
    if response.status_code != 200:
        raise UnavailableError(
            f"Could not download the API descriptor from {reference_url}: "
            f"HTTP {response.status_code}"
        )

    content = response.content
    checksum = hashlib.md5(content).hexdigest()
    if expected_checksum is None:
        logger.warning(f"API descriptor checksum not verified ({checksum})")
    elif checksum != expected_checksum:
        raise IntegrityError(
            f"API descriptor at {reference_url} has checksum {checksum}, "
            f"expected {expected_checksum}"
        )

    registry = Registry.from_spec_dict(json.loads(content), origin_url=reference_url)
    logger.info(f"Loaded {len(registry)} operations from {reference_url}")
    return registry
