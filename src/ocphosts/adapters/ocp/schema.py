"""Pydantic models describing the OCP GraphQL payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_empty(value: object) -> object:
    return [] if value is None else value


def _ref_id(ref: Ref | None) -> str:
    return ref.id if ref is not None else ""


class OcpBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# -- request / response envelopes ------------------------------------------------


class GraphQLRequest(OcpBaseModel):
    query: str
    variables: dict[str, Any] | None = None


class GraphQLErrorItem(OcpBaseModel):
    message: str = ""


class GraphQLResponse(OcpBaseModel):
    data: dict[str, Any] | None = None
    errors: list[GraphQLErrorItem] = Field(default_factory=list["GraphQLErrorItem"])

    _normalize_errors = field_validator("errors", mode="before")(_none_to_empty)


# -- nodes -----------------------------------------------------------------------


class Ref(OcpBaseModel):
    id: str = ""


class VcenterRef(Ref):
    name: str | None = None


class DataProtectionPolicyRef(Ref):
    note: str | None = None


class IpAddress(OcpBaseModel):
    ip: str
    prefixlen: int | None = None


class NetworkInterfaceNode(OcpBaseModel):
    network: Ref | None = None
    ipv4_addresses: list[IpAddress] = Field(
        default_factory=list["IpAddress"], alias="ipv4Addresses"
    )
    ipv6_addresses: list[IpAddress] = Field(
        default_factory=list["IpAddress"], alias="ipv6Addresses"
    )
    start_connected: bool | None = Field(default=None, alias="startConnected")

    _normalize_lists = field_validator("ipv4_addresses", "ipv6_addresses", mode="before")(
        _none_to_empty
    )

    @property
    def network_id(self) -> str:
        return _ref_id(self.network)


class VirtualHostNode(OcpBaseModel):
    """``VirtualHostNode`` as selected by the read query and mutation payloads."""

    id: str = ""
    uuid: str = ""
    hostname: str = ""
    state: str = ""
    region: str = ""
    note: str | None = None
    cpu_count: int | None = Field(default=None, alias="cpuCount")
    cores_per_socket: int | None = Field(default=None, alias="coresPerSocket")
    memory_size_mb: int | None = Field(default=None, alias="memorySizeMB")
    data_protection_policy: DataProtectionPolicyRef | None = Field(
        default=None, alias="dataProtectionPolicy"
    )
    network_interfaces: list[NetworkInterfaceNode] = Field(
        default_factory=list["NetworkInterfaceNode"], alias="networkInterfaceList"
    )
    tier: Ref | None = None
    domain: Ref | None = None
    template: Ref | None = None
    project: Ref | None = None
    customer: Ref | None = None
    vcenter: VcenterRef | None = None

    _normalize_interfaces = field_validator("network_interfaces", mode="before")(
        _none_to_empty
    )

    @property
    def tier_id(self) -> str:
        return _ref_id(self.tier)

    @property
    def domain_id(self) -> str:
        return _ref_id(self.domain)

    @property
    def template_id(self) -> str:
        return _ref_id(self.template)

    @property
    def project_id(self) -> str:
        return _ref_id(self.project)

    @property
    def customer_id(self) -> str:
        return _ref_id(self.customer)

    @property
    def vcenter_id(self) -> str:
        return _ref_id(self.vcenter)


# -- mutation payloads -----------------------------------------------------------


class FieldErrorItem(OcpBaseModel):
    field: str = ""
    messages: list[str] = Field(default_factory=list)

    _normalize_messages = field_validator("messages", mode="before")(_none_to_empty)


class MutationPayload(OcpBaseModel):
    """Fields shared by every arm of a mutation union."""

    typename: str = Field(alias="__typename")
    message: str | None = None
    errors: list[FieldErrorItem] = Field(default_factory=list["FieldErrorItem"])
    reasons: list[str] = Field(default_factory=list)

    _normalize_lists = field_validator("errors", "reasons", mode="before")(_none_to_empty)

    def success_object(self) -> object | None:
        return None


class VirtualHostCreatedPayload(MutationPayload):
    """``VirtualHostCreated`` nests the new host under ``virtualHost``."""

    virtual_host: VirtualHostNode | None = Field(default=None, alias="virtualHost")

    def success_object(self) -> VirtualHostNode | None:
        return self.virtual_host


class AcknowledgementPayload(MutationPayload):
    """Success arm that only acknowledges the request.

    ``TaskExecutionNode`` means a resize, tier or delete job was queued; the
    typename alone is the acknowledgement and the job id is optional.
    """

    id: str | None = None

    def success_object(self) -> str:
        return self.id or self.typename


class VirtualHostNodePayload(MutationPayload, VirtualHostNode):
    """Inventory mutations return the ``VirtualHostNode`` fields inline."""

    def success_object(self) -> VirtualHostNode | None:
        if not self.id:
            return None
        return VirtualHostNode.model_validate(self.model_dump(by_alias=True))


# -- lookups ---------------------------------------------------------------------


class NamedNode(OcpBaseModel):
    id: str
    name: str | None = None
    note: str | None = None


class Edge(OcpBaseModel):
    node: NamedNode


class Connection(OcpBaseModel):
    edges: list[Edge] = Field(default_factory=list["Edge"])

    _normalize_edges = field_validator("edges", mode="before")(_none_to_empty)

    @property
    def nodes(self) -> list[NamedNode]:
        return [edge.node for edge in self.edges]
