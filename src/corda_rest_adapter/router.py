from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .credentials import CredentialResolver, EnvCredentialResolver
from .errors import UnsupportedResourceError
from .executor import BatchExecutor
from .operations import Resource
from .parameters import ParameterSource
from .schemas import OutputRecord
from .transport import RequestsTransport, Transport


@dataclass
class Routed:
    resource: Resource
    operation: str
    results: List[OutputRecord]
    elapsed_ms: float

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.error)


class ResourceRouter:
    def __init__(
        self,
        transport: Optional[Transport] = None,
        credential_resolver: Optional[CredentialResolver] = None
    ) -> None:
        """Initialize the resource router.

        Args:
            transport: Transport shared by all executors.
                      If None, a RequestsTransport with the configured timeout is used.
            credential_resolver: Resolver every executor call asks for credentials.
                      If None, credentials come from CORDA_* environment variables.
        """
        self._transport = transport or RequestsTransport()
        self._credential_resolver = credential_resolver or EnvCredentialResolver()
        self.executors: Dict[Resource, BatchExecutor] = {
            resource: BatchExecutor(resource, self._transport, self._credential_resolver)
            for resource in Resource
        }

    @property
    def transport(self) -> Transport:
        return self._transport

    def route(self, parameters: ParameterSource) -> Resource:
        """Pick the resource for the batch from record 0's ``resource`` value."""
        value = parameters.get("resource", 0, None)
        if value is None:
            raise UnsupportedResourceError(value)
        return Resource.parse(value)

    def execute(
        self,
        items: Sequence[Any],
        parameters: ParameterSource,
        continue_on_fail: bool = False
    ) -> List[OutputRecord]:
        """Dispatch the whole batch to the executor of the selected resource."""
        return self.handle(items, parameters, continue_on_fail).results

    def handle(
        self,
        items: Sequence[Any],
        parameters: ParameterSource,
        continue_on_fail: bool = False
    ) -> Routed:
        """Route and execute a batch.

        Args:
            items: Input records
            parameters: Parameter values per record index
            continue_on_fail: Capture record errors instead of aborting

        Returns:
            Routed object with resource, operation, output records and elapsed time

        Raises:
            UnsupportedResourceError: Unknown resource; nothing is dispatched
            UnsupportedOperationError: Operation not declared for the resource
            RecordError: First record failure when ``continue_on_fail`` is False
        """
        start = time.perf_counter()
        resource = self.route(parameters)
        results = self.executors[resource].execute(items, parameters, continue_on_fail)
        operation = parameters.get("operation", 0, "")
        elapsed = (time.perf_counter() - start) * 1000
        return Routed(resource=resource, operation=str(operation), results=results, elapsed_ms=elapsed)
