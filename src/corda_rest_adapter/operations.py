"""Declarative catalog of gateway operations.

Every (resource, operation) pair is bound to exactly one OperationTemplate:
HTTP method, path pattern, declared parameters with their defaults, and the
shape of the body or query string. A single generic executor interprets this
table instead of carrying one hand-written branch per operation.

Path patterns use ``{name}`` placeholders; each placeholder names a declared
parameter whose value is percent-encoded into the path.
"""
from __future__ import annotations

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple

from .errors import UnsupportedOperationError, UnsupportedResourceError

HttpMethod = Literal["GET", "POST", "DELETE"]
ParamKind = Literal["string", "number", "json"]

DEFAULT_PAGING = '{"pageNumber": 1, "pageSize": 100}'


class Resource(str, Enum):
    """Top-level categories of gateway operations."""
    VAULT_QUERIES = "vaultQueries"
    FLOW_EXECUTION = "flowExecution"
    TOKEN_MANAGEMENT = "tokenManagement"
    NETWORK_MAP = "networkMap"
    ATTACHMENTS = "attachments"

    @property
    def display_name(self) -> str:
        return self.value[0].upper() + self.value[1:]

    @classmethod
    def parse(cls, value: Any) -> "Resource":
        """Match a resource by value, case-insensitively.

        Accepts both ``vaultQueries`` and ``VaultQueries``.

        Raises:
            UnsupportedResourceError: If no resource matches.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for resource in cls:
                if resource.value.lower() == wanted:
                    return resource
        raise UnsupportedResourceError(value)


class BodyEncoding(Enum):
    """How the request payload is carried."""
    NONE = "none"
    JSON = "json"              # structured body, serialized by the transport
    JSON_TEXT = "json_text"    # body pre-serialized to a JSON string
    MULTIPART = "multipart"    # multipart form fields


class ResponseType(Enum):
    JSON = "json"
    BINARY = "binary"


@dataclass(frozen=True)
class ParamSpec:
    """A declared operation parameter.

    ``default`` is only consulted when ``required`` is False.
    """
    name: str
    display_name: str
    kind: ParamKind = "string"
    required: bool = True
    default: Any = None
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "type": self.kind,
            "required": self.required,
            "default": self.default,
            "description": self.description,
        }


@dataclass(frozen=True)
class OperationTemplate:
    """Request shape of one operation.

    Attributes:
        resource: Resource the operation belongs to
        name: Operation identifier, e.g. ``queryVaultStates``
        method: HTTP method
        path: Path below the base URL, with ``{param}`` placeholders
        params: Declared parameters, in read order
        body_encoding: How the payload is carried
        body_fields: Parameters assembled into the body object, in order
        body_param: Parameter whose parsed value *is* the whole body
        form_fields: Mapping of multipart field name -> parameter name
        file_fields: Multipart fields whose value is a local file path
        query_fields: Parameters sent as the query string, in order
        response_type: JSON or raw bytes
    """
    resource: Resource
    name: str
    display_name: str
    description: str
    method: HttpMethod
    path: str
    params: Tuple[ParamSpec, ...] = ()
    body_encoding: BodyEncoding = BodyEncoding.NONE
    body_fields: Tuple[str, ...] = ()
    body_param: Optional[str] = None
    form_fields: Tuple[Tuple[str, str], ...] = ()
    file_fields: Tuple[str, ...] = ()
    query_fields: Tuple[str, ...] = ()
    response_type: ResponseType = ResponseType.JSON
    path_params: Tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        names = tuple(
            fname for _, fname, _, _ in string.Formatter().parse(self.path) if fname
        )
        object.__setattr__(self, "path_params", names)

    def param(self, name: str) -> ParamSpec:
        for spec in self.params:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "method": self.method,
            "path": self.path,
            "parameters": [p.to_dict() for p in self.params],
        }


# Shared parameter declarations

def _criteria(description: str = "Query criteria as JSON object") -> ParamSpec:
    return ParamSpec("criteria", "Criteria", kind="json", required=False,
                     default="{}", description=description)


SORTING = ParamSpec("sorting", "Sorting", kind="json", required=False, default="{}",
                    description="Sorting criteria as JSON object")
PAGING = ParamSpec("paging", "Paging", kind="json", required=False, default=DEFAULT_PAGING,
                   description="Paging configuration as JSON object")
STATE_TYPE = ParamSpec("stateType", "State Type", description="The contract state type to query")
FLOW_ARGS = ParamSpec("flowArgs", "Flow Arguments", kind="json", required=False, default="{}",
                      description="Arguments to pass to the flow constructor")
RUN_ID = ParamSpec("runId", "Run ID", description="The unique identifier of the flow run")
TOKEN_TYPE = ParamSpec("tokenType", "Token Type", description="The type of token to operate on")
AMOUNT = ParamSpec("amount", "Amount", kind="number",
                   description="The amount of tokens to operate on")
HOLDER = ParamSpec("holder", "Holder", description="The party that holds the tokens")
ATTACHMENT_ID = ParamSpec("attachmentId", "Attachment ID",
                          description="The unique identifier of the attachment")


def _flow_class(description: str) -> ParamSpec:
    return ParamSpec("flowClassName", "Flow Class Name", description=description)


def _limit(default: int, description: str) -> ParamSpec:
    return ParamSpec("limit", "Limit", kind="number", required=False, default=default,
                     description=description)


def _offset(description: str) -> ParamSpec:
    return ParamSpec("offset", "Offset", kind="number", required=False, default=0,
                     description=description)


_V = Resource.VAULT_QUERIES
_F = Resource.FLOW_EXECUTION
_T = Resource.TOKEN_MANAGEMENT
_N = Resource.NETWORK_MAP
_A = Resource.ATTACHMENTS

_TEMPLATES: Tuple[OperationTemplate, ...] = (
    # Vault queries
    OperationTemplate(
        _V, "queryVaultStates", "Query Vault States", "Query vault states with criteria",
        "POST", "/vault/query",
        params=(STATE_TYPE, _criteria(), SORTING, PAGING),
        body_encoding=BodyEncoding.JSON,
        body_fields=("stateType", "criteria", "sorting", "paging"),
    ),
    OperationTemplate(
        _V, "queryVaultStatesByCriteria", "Query Vault States By Criteria",
        "Advanced vault state queries",
        "POST", "/vault/query/by/criteria",
        params=(
            ParamSpec("contractStateType", "Contract State Type",
                      description="The contract state type for advanced queries"),
            _criteria(), SORTING, PAGING,
        ),
        body_encoding=BodyEncoding.JSON,
        body_fields=("contractStateType", "criteria", "sorting", "paging"),
    ),
    OperationTemplate(
        _V, "getVaultState", "Get Vault State", "Retrieve specific vault state",
        "GET", "/vault/states/{stateRef}",
        params=(ParamSpec("stateRef", "State Reference",
                          description="The state reference identifier"),),
    ),
    OperationTemplate(
        _V, "queryConsumableStates", "Query Consumable States", "Query unconsumed states",
        "POST", "/vault/query/consumable",
        params=(STATE_TYPE, _criteria(), SORTING, PAGING),
        body_encoding=BodyEncoding.JSON,
        body_fields=("stateType", "criteria", "sorting", "paging"),
    ),
    OperationTemplate(
        _V, "queryVaultTransactions", "Query Vault Transactions", "Query vault transactions",
        "POST", "/vault/transactions",
        params=(_criteria(), SORTING, PAGING),
        body_encoding=BodyEncoding.JSON,
        body_fields=("criteria", "sorting", "paging"),
    ),
    OperationTemplate(
        _V, "getVaultTransaction", "Get Vault Transaction", "Get specific transaction",
        "GET", "/vault/transactions/{txnId}",
        params=(ParamSpec("txnId", "Transaction ID",
                          description="The transaction identifier"),),
    ),

    # Flow execution
    OperationTemplate(
        _F, "startFlow", "Start Flow", "Start a new flow execution",
        "POST", "/flows/{flowClassName}",
        params=(_flow_class("The fully qualified class name of the flow to start"), FLOW_ARGS),
        body_encoding=BodyEncoding.JSON,
        body_param="flowArgs",
    ),
    OperationTemplate(
        _F, "getCompletedFlows", "Get Completed Flows", "List completed flow executions",
        "GET", "/flows/completed",
        params=(_limit(100, "Maximum number of flows to return"),
                _offset("Number of flows to skip")),
        query_fields=("limit", "offset"),
    ),
    OperationTemplate(
        _F, "getFlowStatus", "Get Flow Status", "Get status of running flow",
        "GET", "/flows/{runId}",
        params=(RUN_ID,),
    ),
    OperationTemplate(
        _F, "getFlowProgress", "Get Flow Progress", "Get flow execution progress",
        "GET", "/flows/{runId}/progress",
        params=(RUN_ID,),
    ),
    OperationTemplate(
        _F, "killFlow", "Kill Flow", "Terminate a running flow",
        "DELETE", "/flows/{runId}",
        params=(ParamSpec("runId", "Run ID",
                          description="The unique identifier of the flow run to terminate"),),
    ),
    OperationTemplate(
        _F, "startTrackedFlow", "Start Tracked Flow", "Start flow with progress tracking",
        "POST", "/flows/tracked/{flowClassName}",
        params=(_flow_class("The fully qualified class name of the flow to start with tracking"),
                FLOW_ARGS),
        body_encoding=BodyEncoding.JSON,
        body_param="flowArgs",
    ),

    # Token management
    OperationTemplate(
        _T, "issueTokens", "Issue Tokens", "Issue new tokens",
        "POST", "/tokens/issue",
        params=(TOKEN_TYPE, AMOUNT, HOLDER,
                ParamSpec("notary", "Notary", description="The notary node for the transaction")),
        body_encoding=BodyEncoding.JSON,
        body_fields=("tokenType", "amount", "holder", "notary"),
    ),
    OperationTemplate(
        _T, "moveTokens", "Move Tokens", "Transfer tokens between parties",
        "POST", "/tokens/move",
        params=(TOKEN_TYPE, AMOUNT, HOLDER,
                ParamSpec("newHolder", "New Holder", description="The party to receive the tokens")),
        body_encoding=BodyEncoding.JSON,
        body_fields=("tokenType", "amount", "holder", "newHolder"),
    ),
    OperationTemplate(
        _T, "redeemTokens", "Redeem Tokens", "Redeem/burn existing tokens",
        "POST", "/tokens/redeem",
        params=(TOKEN_TYPE, AMOUNT,
                ParamSpec("issuer", "Issuer", description="The token issuer party")),
        body_encoding=BodyEncoding.JSON,
        body_fields=("tokenType", "amount", "issuer"),
    ),
    OperationTemplate(
        _T, "getTokenBalances", "Get Token Balances", "Query token balances",
        "GET", "/tokens/balances",
        params=(TOKEN_TYPE, HOLDER),
        query_fields=("tokenType", "holder"),
    ),
    OperationTemplate(
        _T, "queryTokenBalances", "Query Token Balances", "Advanced token balance queries",
        "POST", "/tokens/balances/query",
        params=(TOKEN_TYPE, _criteria("Advanced query criteria as JSON object")),
        body_encoding=BodyEncoding.JSON,
        body_fields=("criteria", "tokenType"),
    ),
    OperationTemplate(
        _T, "getTokenTypes", "Get Token Types", "List available token types",
        "GET", "/tokens/types",
        params=(_limit(50, "Maximum number of token types to return"),
                _offset("Number of token types to skip")),
        query_fields=("limit", "offset"),
    ),

    # Network map
    OperationTemplate(
        _N, "getNetworkNodes", "Get Network Nodes", "List all network nodes",
        "GET", "/network/nodes",
    ),
    OperationTemplate(
        _N, "getNetworkNode", "Get Network Node", "Get specific party information",
        "GET", "/network/nodes/{party}",
        params=(ParamSpec("party", "Party Name",
                          description="The party identifier to get information for"),),
    ),
    OperationTemplate(
        _N, "getNetworkParties", "Get Network Parties", "List all known parties",
        "GET", "/network/parties",
    ),
    OperationTemplate(
        _N, "getNodeInfo", "Get Node Info", "Get current node information",
        "GET", "/network/parties/me",
    ),
    OperationTemplate(
        _N, "getNotaries", "Get Notaries", "List available notary services",
        "GET", "/network/notaries",
    ),
    OperationTemplate(
        _N, "lookupPartyByName", "Lookup Party By Name", "Find party by X.500 name",
        "POST", "/network/parties/lookup",
        params=(ParamSpec("name", "X.500 Name",
                          description="The X.500 name of the party to look up"),),
        body_encoding=BodyEncoding.JSON,
        body_fields=("name",),
    ),

    # Attachments
    OperationTemplate(
        _A, "uploadAttachment", "Upload Attachment", "Upload a new attachment file",
        "POST", "/attachments",
        params=(
            ParamSpec("filePath", "File Path", description="Local path of the file to upload"),
            ParamSpec("filename", "Filename", description="Name to store the attachment under"),
        ),
        body_encoding=BodyEncoding.MULTIPART,
        form_fields=(("file", "filePath"), ("filename", "filename")),
        file_fields=("file",),
    ),
    OperationTemplate(
        _A, "getAttachment", "Get Attachment", "Download an attachment by ID",
        "GET", "/attachments/{attachmentId}",
        params=(ATTACHMENT_ID,),
        response_type=ResponseType.BINARY,
    ),
    OperationTemplate(
        _A, "listAttachments", "List Attachments", "List all available attachments",
        "GET", "/attachments",
    ),
    OperationTemplate(
        _A, "deleteAttachment", "Delete Attachment", "Remove an attachment by ID",
        "DELETE", "/attachments/{attachmentId}",
        params=(ATTACHMENT_ID,),
    ),
    OperationTemplate(
        _A, "getAttachmentMetadata", "Get Attachment Metadata",
        "Get metadata information for an attachment",
        "GET", "/attachments/{attachmentId}/metadata",
        params=(ATTACHMENT_ID,),
    ),
    OperationTemplate(
        _A, "verifyAttachment", "Verify Attachment", "Verify the integrity of an attachment",
        "POST", "/attachments/verify",
        params=(ATTACHMENT_ID,),
        body_encoding=BodyEncoding.JSON_TEXT,
        body_fields=("attachmentId",),
    ),
)

OPERATIONS: Dict[Resource, Dict[str, OperationTemplate]] = {r: {} for r in Resource}
for _template in _TEMPLATES:
    OPERATIONS[_template.resource][_template.name] = _template

# Operation preselected when a resource is first chosen.
DEFAULT_OPERATIONS: Dict[Resource, str] = {
    Resource.VAULT_QUERIES: "queryVaultStates",
    Resource.FLOW_EXECUTION: "startFlow",
    Resource.TOKEN_MANAGEMENT: "issueTokens",
    Resource.NETWORK_MAP: "getNetworkNodes",
    Resource.ATTACHMENTS: "uploadAttachment",
}


def get_template(resource: Resource, operation: Any) -> OperationTemplate:
    """Look up the template for ``operation`` under ``resource``.

    Raises:
        UnsupportedOperationError: If the operation is not declared under
            the resource (including operations of other resources).
    """
    template = OPERATIONS[resource].get(operation) if isinstance(operation, str) else None
    if template is None:
        raise UnsupportedOperationError(operation, resource.value)
    return template


def catalog() -> Dict[str, Any]:
    """Describe every resource and its operations for host UIs."""
    return {
        "resources": [
            {
                "name": resource.value,
                "display_name": resource.display_name,
                "default_operation": DEFAULT_OPERATIONS[resource],
                "operations": [t.to_dict() for t in OPERATIONS[resource].values()],
            }
            for resource in Resource
        ]
    }
