"""cBioPortal API client handle and operation invocation."""

import hashlib
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from bravado.client import construct_request
from bravado_core.exception import SwaggerMappingError

from . import config
from .descriptor import OperationDescriptor, Registry, load_descriptor
from .errors import ConfigurationError
from .transport import get_transport
from .utils import require_api, to_jsonable

logger = logging.getLogger(__name__)


def handle_token(token: str) -> Dict[str, str]:
    """
    Build the authorization header from a token or a token file.

    Args:
        token: Bearer token, or path to a file containing ``token: <value>``

    Returns:
        Header mapping with a single ``Authorization`` entry

    Raises:
        ConfigurationError: ``token`` looks like a path but no such file exists
    """
    path = Path(token).expanduser()
    if path.is_file():
        lines = [line.strip() for line in path.read_text().splitlines() if line.strip()]
        token = lines[0] if lines else ""
    elif os.sep in token or "/" in token:
        raise ConfigurationError(f"The token filepath is not valid: {token}")
    token = token.replace("token: ", "").strip()
    if not token:
        raise ConfigurationError("The token is empty")
    return {"Authorization": f"Bearer {token}"}


@dataclass(frozen=True)
class CBioPortal:
    """Connection to one cBioPortal instance. Immutable once built."""

    hostname: str
    protocol: str
    api_path: str
    registry: Registry = field(repr=False, compare=False)
    transport: Any = field(repr=False, compare=False)
    api_header: Dict[str, str] = field(default_factory=dict, repr=False)

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.hostname}{self.registry.base_path}"

    @property
    def api_url(self) -> str:
        return f"{self.protocol}://{self.hostname}{self.api_path}"

    def identity(self) -> Dict[str, Any]:
        """Fields that distinguish cached results of different clients."""
        auth = self.api_header.get("Authorization", "")
        return {
            "hostname": self.hostname,
            "protocol": self.protocol,
            "api_path": self.api_path,
            "auth": hashlib.md5(auth.encode("utf-8")).hexdigest() if auth else None,
        }


def cbioportal(
    hostname: str = config.HOSTNAME,
    protocol: str = config.PROTOCOL,
    api_path: str = config.API_PATH,
    token: Optional[str] = config.TOKEN,
    checksum: Optional[str] = config.API_CHECKSUM,
    transport: Any = None,
) -> CBioPortal:
    """
    Create a client for a cBioPortal instance.

    The token is validated before anything is sent over the network; the API
    descriptor is then downloaded and verified against ``checksum``.

    Args:
        hostname: Host serving the API (default: www.cbioportal.org)
        protocol: 'https' or 'http'
        api_path: Location of the API descriptor on the host
        token: Bearer token or path to a token file (optional)
        checksum: Expected md5 of the API descriptor, None to skip the check
        transport: Transport to use (default: shared ``RequestsTransport``)

    Returns:
        CBioPortal client handle
    """
    api_header = handle_token(token) if token else {}
    if transport is None:
        transport = get_transport()
    api_url = f"{protocol}://{hostname}{api_path}"
    registry = load_descriptor(api_url, checksum, transport, headers=api_header or None)
    return CBioPortal(
        hostname=hostname,
        protocol=protocol,
        api_path=api_path,
        registry=registry,
        transport=transport,
        api_header=api_header,
    )


def search_ops(api: CBioPortal, keyword: str) -> List[str]:
    """List operation names matching a keyword."""
    require_api(api)
    return api.registry.search(keyword)


def _wrap_body(operation: OperationDescriptor, params: Dict[str, Any]) -> Dict[str, Any]:
    """Collect arguments that are not declared parameters into the body object."""
    declared = {p.name for p in operation.params}
    loose = {key: value for key, value in params.items() if key not in declared}
    body_param = operation.body_param
    if not loose or body_param is None or body_param.name in params:
        # bravado rejects whatever is left undeclared
        return params
    if body_param.type == "array":
        raise ConfigurationError(
            f"Operation '{operation.name}' expects its body as '{body_param.name}'"
        )
    if body_param.properties:
        unknown = sorted(set(loose) - set(body_param.properties))
        if unknown:
            raise ConfigurationError(
                f"Unknown parameter(s) {unknown} for operation '{operation.name}'"
            )
    wrapped = {key: value for key, value in params.items() if key in declared}
    wrapped[body_param.name] = loose
    return wrapped


def invoke(api: CBioPortal, name: str, use_cache: bool = False, **params: Any) -> Any:
    """
    Call one API operation.

    The request is built by bravado from the API descriptor. Arguments set to
    None are dropped; arguments that are not declared parameters are wrapped
    into the operation's body object.

    Args:
        api: Client handle
        name: Operation ID, e.g. 'getAllStudiesUsingGET'
        use_cache: Consult the transport's response cache
        **params: Operation parameters

    Returns:
        The unopened transport response
    """
    require_api(api)
    operation = api.registry[name]
    params = {k: to_jsonable(v) for k, v in params.items() if v is not None}
    params = _wrap_body(operation, params)
    try:
        request = construct_request(
            operation.operation, {"headers": dict(api.api_header)}, **params
        )
    except SwaggerMappingError as exc:
        raise ConfigurationError(f"Invalid arguments for '{name}': {exc}") from exc

    # requests go to the handle's host, not the one named in the descriptor
    prefix = operation.operation.swagger_spec.api_url.rstrip("/")
    url = api.base_url + request["url"][len(prefix):]
    body = json.loads(request["data"]) if "data" in request else None
    logger.debug(f"Invoking {name}: {request['method']} {url} (use_cache={use_cache})")
    return api.transport.send(
        request["method"],
        url,
        headers=request["headers"] or None,
        params=request["params"] or None,
        json=body,
        use_cache=use_cache,
    )
