"""GraphQL documents sent to the OCP API."""

from __future__ import annotations

from typing import Final

_FAILURE_ARMS = """
    ... on ValidationErrors {
      message
      errors {
        field
        messages
      }
    }
    ... on Unauthorized {
      message
    }
    ... on OperationUnavailable {
      message
      reasons
    }
"""

_CREATED_HOST_FIELDS = """
        id
        uuid
        hostname
        state
        cpuCount
        coresPerSocket
        memorySizeMB
        tier { id }
        domain { id }
        template { id }
        project { id }
        customer { id }
        region
"""

_INVENTORY_HOST_FIELDS = """
      id
      uuid
      hostname
      note
      state
      region
      tier { id }
      project { id }
      customer { id }
      vcenter { id name }
"""

CREATE_VIRTUAL_HOST: Final[str] = f"""
mutation CreateVm($input: VirtualHostCreateInput!) {{
  virtualHostCreate(input: $input) {{
    __typename
    ... on VirtualHostCreated {{
      virtualHost {{{_CREATED_HOST_FIELDS}      }}
    }}{_FAILURE_ARMS}  }}
}}
"""

CREATE_IMMUTABLE_VIRTUAL_HOST: Final[str] = f"""
mutation CreateVmImmutable($input: VirtualHostCreateImmutableInput!) {{
  virtualHostCreateImmutable(input: $input) {{
    __typename
    ... on VirtualHostCreated {{
      virtualHost {{{_CREATED_HOST_FIELDS}      }}
    }}{_FAILURE_ARMS}  }}
}}
"""

GET_VIRTUAL_HOST: Final[str] = """
query GetVm($id: GlobalID!) {
  virtualHost(id: $id) {
    id
    uuid
    hostname
    state
    cpuCount
    coresPerSocket
    memorySizeMB
    note
    dataProtectionPolicy { id note }
    networkInterfaceList {
      network { id }
      ipv4Addresses { ip prefixlen }
      ipv6Addresses { ip prefixlen }
      startConnected
    }
    tier { id }
    domain { id }
    template { id }
    project { id }
    customer { id }
    region
  }
}
"""

RESIZE_VIRTUAL_HOST: Final[str] = f"""
mutation ResizeVm($input: VirtualHostResizeInput!) {{
  virtualHostResize(input: $input) {{
    __typename
    ... on TaskExecutionNode {{
      id
    }}{_FAILURE_ARMS}  }}
}}
"""

UPDATE_VIRTUAL_HOST_TIER: Final[str] = f"""
mutation UpdateVmTier($input: VirtualHostUpdateTierInput!) {{
  virtualHostUpdateTier(input: $input) {{
    __typename
    ... on TaskExecutionNode {{
      id
    }}{_FAILURE_ARMS}  }}
}}
"""

DELETE_VIRTUAL_HOST: Final[str] = f"""
mutation DeleteVm($input: VirtualHostDeleteInput!) {{
  virtualHostDelete(input: $input) {{
    __typename
    ... on TaskExecutionNode {{
      id
    }}{_FAILURE_ARMS}  }}
}}
"""

CREATE_INVENTORY_HOST: Final[str] = f"""
mutation CreateVirtualHostCaas($input: VirtualHostCreateCaasInput!) {{
  virtualHostCreateCaas(input: $input) {{
    __typename
    ... on VirtualHostNode {{{_INVENTORY_HOST_FIELDS}    }}{_FAILURE_ARMS}  }}
}}
"""

UPDATE_INVENTORY_HOST: Final[str] = f"""
mutation UpdateVirtualHostCaas($input: VirtualHostUpdateCaasInput!) {{
  virtualHostUpdateCaas(input: $input) {{
    __typename
    ... on VirtualHostNode {{{_INVENTORY_HOST_FIELDS}    }}{_FAILURE_ARMS}  }}
}}
"""

DELETE_INVENTORY_HOST: Final[str] = f"""
mutation DeleteVirtualHostCaas($input: VirtualHostDeleteCaasInput!) {{
  virtualHostDeleteCaas(input: $input) {{
    __typename
    ... on VirtualHostNode {{ id }}{_FAILURE_ARMS}  }}
}}
"""

GET_INVENTORY_HOST: Final[str] = f"""
query GetVirtualHostCaas($id: GlobalID!) {{
  virtualHost(id: $id) {{{_INVENTORY_HOST_FIELDS}  }}
}}
"""

# -- lookups ---------------------------------------------------------------------

CUSTOMER_BY_NAME: Final[str] = """
query CustomerByName($name: StrFilterLookup) {
  customerList(filters: { name: $name }) {
    edges { node { id name } }
  }
}
"""

PROJECT_BY_NAME: Final[str] = """
query ProjectByNameAndCustomer($name: StrFilterLookup, $customer: CustomerFilter) {
  projectList(filters: { name: $name, customer: $customer }) {
    edges { node { id name } }
  }
}
"""

DOMAIN_BY_NAME: Final[str] = """
query DomainByFilters($filters: DomainFilter) {
  domainList(filters: $filters, first: 100) {
    edges { node { id name } }
  }
}
"""

NETWORK_BY_NAME: Final[str] = """
query NetworkByName($name: StrFilterLookup, $customer: CustomerFilter) {
  networkList(filters: { name: $name, customer: $customer }) {
    edges { node { id name } }
  }
}
"""

TIER_BY_NAME: Final[str] = """
query TierByName($name: StrFilterLookup, $solutionType: SolutionTypeEnumFilterLookup) {
  tierList(filters: { name: $name, solutionType: $solutionType }) {
    edges { node { id name } }
  }
}
"""

TEMPLATE_BY_NAME: Final[str] = """
query TemplateByName($filters: TemplateFilter) {
  templateList(filters: $filters) {
    edges { node { id name } }
  }
}
"""

DATA_PROTECTION_POLICY_BY_NOTE: Final[str] = """
query DataProtectionPolicyByFilters($filters: DataProtectionPolicyFilter) {
  dataProtectionPolicyList(filters: $filters, first: 100) {
    edges { node { id note } }
  }
}
"""

VCENTER_BY_NAME: Final[str] = """
query VcenterByNameAndCustomer($name: StrFilterLookup, $customer: CustomerFilter) {
  vcenterList(filters: { name: $name, customer: $customer, DISTINCT: true }) {
    edges { node { id name } }
  }
}
"""
