"""Batch execution for one resource.

One BatchExecutor instance exists per resource. It interprets the operation
catalog instead of carrying a branch per operation.

Flow (per invocation):
  1. Read ``operation`` once (record 0) and look up its template; an
     operation outside this resource aborts before any record is touched
  2. Resolve credentials once
  3. For each record, strictly in order:
       read parameters -> parse JSON parameters -> build request -> send
  4. Wrap each response (or captured error) into an OutputRecord

Record-level failures (RecordError) either become ``{"error": message}``
outputs (continue-on-failure) or stop the batch immediately.
"""
import base64
import time
from typing import Any, Dict, List, Sequence

from .credentials import CredentialResolver, Credentials
from .errors import RecordError
from .logging import logger
from .operations import OperationTemplate, Resource, get_template
from .parameters import MISSING, ParameterSource, parse_json_parameter, parse_number_parameter
from .request_builder import build_request
from .schemas import OutputRecord, RequestDescriptor
from .transport.base import Transport


def read_parameters(
    template: OperationTemplate,
    parameters: ParameterSource,
    index: int
) -> Dict[str, Any]:
    """Read and parse every declared parameter of ``template`` for one record.

    Optional parameters fall back to their declared defaults; JSON-kind
    values given as text are parsed and number-kind text is coerced.

    Raises:
        MissingParameterError: Required parameter has no value
        InvalidParameterJSONError: JSON-kind parameter is not valid JSON
        ParameterError: Number-kind parameter is not numeric
    """
    values: Dict[str, Any] = {}
    for spec in template.params:
        default = MISSING if spec.required else spec.default
        value = parameters.get(spec.name, index, default)
        if spec.kind == "json":
            value = parse_json_parameter(spec.name, value)
        elif spec.kind == "number":
            value = parse_number_parameter(spec.name, value, index)
        values[spec.name] = value
    return values


def normalize_response(body: Any) -> Any:
    """Make a transport result safe to place in an output record.

    Raw bytes (attachment downloads) are base64-encoded.
    """
    if isinstance(body, (bytes, bytearray)):
        return {
            "data": base64.b64encode(bytes(body)).decode("ascii"),
            "encoding": "base64",
            "fileSize": len(body),
        }
    return body


class BatchExecutor:
    """Executes one operation of a single resource over a batch of records."""

    def __init__(
        self,
        resource: Resource,
        transport: Transport,
        credential_resolver: CredentialResolver
    ) -> None:
        self.resource = resource
        self._transport = transport
        self._credential_resolver = credential_resolver

    def build(
        self,
        template: OperationTemplate,
        parameters: ParameterSource,
        index: int,
        credentials: Credentials
    ) -> RequestDescriptor:
        """Build the request for record ``index`` without sending it."""
        values = read_parameters(template, parameters, index)
        return build_request(template, values, credentials)

    def execute(
        self,
        items: Sequence[Any],
        parameters: ParameterSource,
        continue_on_fail: bool = False
    ) -> List[OutputRecord]:
        """Run the selected operation once per input record.

        Args:
            items: Input records; one output record is produced per item
            parameters: Parameter values per record index
            continue_on_fail: Capture record errors instead of aborting

        Returns:
            Output records in input order, ``item`` equal to the input index.

        Raises:
            UnsupportedOperationError: Operation not declared for this resource
            RecordError: First record failure when ``continue_on_fail`` is False
        """
        results: List[OutputRecord] = []
        if not items:
            return results

        operation = parameters.get("operation", 0, None)
        template = get_template(self.resource, operation)
        credentials = self._credential_resolver.resolve()

        logger.info(
            "batch start resource=%s operation=%s records=%d",
            self.resource.value, template.name, len(items)
        )
        start = time.perf_counter()

        for i in range(len(items)):
            try:
                request = self.build(template, parameters, i, credentials)
                body = self._transport.send(request)
                results.append(OutputRecord(json=normalize_response(body), item=i))
            except RecordError as e:
                logger.warning(
                    "record %d failed resource=%s operation=%s error=%s: %s",
                    i, self.resource.value, template.name, type(e).__name__, e.message
                )
                if not continue_on_fail:
                    e.details.setdefault("item_index", i)
                    raise
                results.append(OutputRecord(json={"error": e.message}, item=i, error=True))

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "batch done resource=%s operation=%s records=%d failed=%d elapsed_ms=%.1f",
            self.resource.value, template.name, len(results),
            sum(1 for r in results if r.error), elapsed
        )
        return results
