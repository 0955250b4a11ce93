"""Resolve human-readable names to OCP object identifiers.

Every lookup must match exactly one object; the identifiers it returns are what
the desired-state manifest refers to.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from ocphosts.domain.errors import AmbiguousMatchError, NoMatchError

from . import documents
from .schema import Connection, NamedNode

if TYPE_CHECKING:
    from ocphosts.domain.ports import RequestExecutor

log = getLogger(__name__)

DEFAULT_SOLUTION_TYPE: Final[str] = "OCP"


def _exact(value: str) -> dict[str, str]:
    return {"exact": value}


def _customer_filter(customer_id: str) -> dict[str, Any]:
    return {"id": _exact(customer_id)}


def _single_match(nodes: list[NamedNode], *, what: str, criteria: str) -> NamedNode:
    if not nodes:
        raise NoMatchError(f"no {what} found with {criteria}")
    if len(nodes) > 1:
        raise AmbiguousMatchError(
            f"multiple {what}s found with {criteria} ({len(nodes)} matches), must be unique"
        )
    return nodes[0]


class OcpLookups:
    """Exactly-one-match queries over the OCP catalogue."""

    def __init__(self, executor: RequestExecutor) -> None:
        self.executor = executor

    def _query(
        self,
        document: str,
        variables: dict[str, Any],
        *,
        field: str,
        what: str,
        criteria: str,
    ) -> NamedNode:
        connection = self.executor.execute(document, variables, field=field, into=Connection)
        nodes = connection.nodes if connection is not None else []
        match = _single_match(nodes, what=what, criteria=criteria)
        log.debug("Resolved %s %s to %s", what, criteria, match.id)
        return match

    def customer(self, name: str) -> NamedNode:
        return self._query(
            documents.CUSTOMER_BY_NAME,
            {"name": _exact(name)},
            field="customerList",
            what="customer",
            criteria=f"name {name!r}",
        )

    def project(self, name: str, *, customer_id: str) -> NamedNode:
        return self._query(
            documents.PROJECT_BY_NAME,
            {"name": _exact(name), "customer": _customer_filter(customer_id)},
            field="projectList",
            what="project",
            criteria=f"name {name!r} for customer {customer_id!r}",
        )

    def domain(self, name: str, *, customer_id: str) -> NamedNode:
        filters = {"customer": _customer_filter(customer_id), "name": _exact(name)}
        return self._query(
            documents.DOMAIN_BY_NAME,
            {"filters": filters},
            field="domainList",
            what="domain",
            criteria=f"name {name!r} for customer {customer_id!r}",
        )

    def network(self, name: str, *, customer_id: str) -> NamedNode:
        return self._query(
            documents.NETWORK_BY_NAME,
            {"name": _exact(name), "customer": _customer_filter(customer_id)},
            field="networkList",
            what="network",
            criteria=f"name {name!r} for customer {customer_id!r}",
        )

    def tier(self, name: str, *, solution_type: str = DEFAULT_SOLUTION_TYPE) -> NamedNode:
        solution_type = solution_type.upper()
        return self._query(
            documents.TIER_BY_NAME,
            {"name": _exact(name), "solutionType": _exact(solution_type)},
            field="tierList",
            what="tier",
            criteria=f"name {name!r} for solution_type {solution_type!r}",
        )

    def template(
        self,
        name: str,
        *,
        customer_id: str,
        region: str,
        solution_type: str = DEFAULT_SOLUTION_TYPE,
    ) -> NamedNode:
        region = region.upper()
        solution_type = solution_type.upper()
        filters = {
            "name": _exact(name),
            "customer": _customer_filter(customer_id),
            "solutionType": _exact(solution_type),
            "region": _exact(region),
        }
        return self._query(
            documents.TEMPLATE_BY_NAME,
            {"filters": filters},
            field="templateList",
            what="template",
            criteria=(
                f"name {name!r} for customer {customer_id!r} in region {region!r} "
                f"(solution_type {solution_type!r})"
            ),
        )

    def data_protection_policy(
        self,
        note: str,
        *,
        customer_id: str,
        project_id: str,
        solution_type: str = DEFAULT_SOLUTION_TYPE,
    ) -> NamedNode:
        solution_type = solution_type.upper()
        filters = {
            "customer": {
                "id": _exact(customer_id),
                "projectList": {"id": _exact(project_id)},
            },
            "separationPodList": {"solutionType": _exact(solution_type)},
            "dedicatedCluster": {"id": {"isNull": True}},
            "note": _exact(note),
            "DISTINCT": True,
        }
        return self._query(
            documents.DATA_PROTECTION_POLICY_BY_NOTE,
            {"filters": filters},
            field="dataProtectionPolicyList",
            what="data protection policy",
            criteria=(
                f"customer_id={customer_id!r}, project_id={project_id!r}, "
                f"solution_type={solution_type!r}, note={note!r}"
            ),
        )

    def vcenter(self, name: str, *, customer_id: str) -> NamedNode:
        return self._query(
            documents.VCENTER_BY_NAME,
            {"name": _exact(name), "customer": _customer_filter(customer_id)},
            field="vcenterList",
            what="vcenter",
            criteria=f"name {name!r} for customer {customer_id!r}",
        )
