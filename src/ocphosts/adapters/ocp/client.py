"""HTTP client for the OCP GraphQL API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Self, overload

import httpx
from pydantic import TypeAdapter, ValidationError

from ocphosts.config.ocp import AUTH_HEADER, OcpConfig
from ocphosts.domain.errors import DecodeError, RemoteReportedError, TransportError
from ocphosts.domain.ports import RequestExecutor

from .schema import GraphQLRequest, GraphQLResponse

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

log = getLogger(__name__)


class OcpClient:
    """Synchronous ``RequestExecutor`` backed by one pooled ``httpx.Client``.

    The client is safe to share between reconcilers; it keeps no state beyond
    the connection pool.
    """

    def __init__(
        self,
        config: OcpConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.Client(
            transport=transport,
            verify=not config.insecure_skip_verify,
            timeout=config.timeout_seconds,
            headers={
                "Content-Type": "application/json",
                AUTH_HEADER: config.token,
            },
        )
        if config.insecure_skip_verify:
            log.debug("TLS certificate verification disabled for %s", config.endpoint)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @overload
    def execute(
        self,
        document: str,
        variables: Mapping[str, object] | None = None,
        *,
        field: None = None,
        into: None = None,
    ) -> None: ...

    @overload
    def execute[T](
        self,
        document: str,
        variables: Mapping[str, object] | None = None,
        *,
        field: str,
        into: type[T],
    ) -> T | None: ...

    def execute[T](
        self,
        document: str,
        variables: Mapping[str, object] | None = None,
        *,
        field: str | None = None,
        into: type[T] | None = None,
    ) -> T | None:
        """POST ``document`` and decode ``data[field]`` into ``into``.

        Returns ``None`` when no destination is given or when the field is null.
        """

        envelope = self._post(document, variables)
        if envelope.errors:
            raise RemoteReportedError(envelope.errors[0].message or "backend reported an error")

        if into is None or field is None:
            return None

        data = envelope.data or {}
        value: Any = data.get(field)
        if value is None:
            return None
        try:
            return TypeAdapter(into).validate_python(value)
        except ValidationError as exc:
            raise DecodeError(f"Unexpected shape for {field!r}: {exc}") from exc

    def _post(
        self,
        document: str,
        variables: Mapping[str, object] | None,
    ) -> GraphQLResponse:
        request = GraphQLRequest(query=document, variables=dict(variables) if variables else None)
        body = request.model_dump(exclude_none=True)
        try:
            response = self._client.post(self.config.endpoint, json=body)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {self.config.endpoint} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(
                f"HTTP {response.status_code} from {self.config.endpoint} is not JSON"
            ) from exc

        try:
            envelope = GraphQLResponse.model_validate(payload)
        except ValidationError as exc:
            raise TransportError(
                f"HTTP {response.status_code} from {self.config.endpoint} is not a GraphQL response"
            ) from exc

        if response.is_error and not envelope.errors:
            raise TransportError(f"HTTP {response.status_code} from {self.config.endpoint}")
        log.debug("OCP responded with HTTP %s", response.status_code)
        return envelope


if TYPE_CHECKING:
    _executor_check: RequestExecutor = OcpClient(OcpConfig(token=""))
