"""Parameter access for batch execution.

The host supplies parameter values by name for a record index. Values may
be plain scalars, already-structured objects, or JSON text; JSON text is
parsed here so that a parse failure surfaces as InvalidParameterJSONError
instead of a transport error.
"""
import json
import math
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .errors import InvalidParameterJSONError, MissingParameterError, ParameterError

# Sentinel: the parameter has no value and no default.
MISSING: Any = object()


class ParameterSource(Protocol):
    """Supplies named parameter values per record index."""

    def get(self, name: str, index: int, default: Any = MISSING) -> Any:
        """Return the value of ``name`` for record ``index``.

        Raises:
            MissingParameterError: If there is no value and no default.
        """
        ...


class RecordParameterSource:
    """Parameter source backed by batch-wide values and per-record overrides.

    A value in ``records[index]`` wins over the batch-wide ``parameters``
    value of the same name. ``None`` counts as absent.

    Example:
        >>> source = RecordParameterSource(
        ...     {"resource": "flowExecution", "operation": "getFlowStatus"},
        ...     [{"runId": "a"}, {"runId": "b"}],
        ... )
        >>> source.get("runId", 1)
        'b'
    """

    def __init__(
        self,
        parameters: Optional[Dict[str, Any]] = None,
        records: Optional[Sequence[Dict[str, Any]]] = None
    ):
        self._parameters = dict(parameters or {})
        self._records: List[Dict[str, Any]] = [dict(r) for r in (records or [])]

    def get(self, name: str, index: int, default: Any = MISSING) -> Any:
        if index < len(self._records):
            value = self._records[index].get(name)
            if value is not None:
                return value
        value = self._parameters.get(name)
        if value is not None:
            return value
        if default is MISSING:
            raise MissingParameterError(name, index)
        return default


def parse_json_parameter(name: str, value: Any) -> Any:
    """Parse a JSON-text parameter.

    Non-string values are assumed to be structured already and are
    returned unchanged.

    Raises:
        InvalidParameterJSONError: If ``value`` is text that is not valid JSON.
    """
    if not isinstance(value, (str, bytes, bytearray)):
        return value
    try:
        return json.loads(value)
    except (ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and undecodable bytes.
        raise InvalidParameterJSONError(name, str(e)) from e


def parse_number_parameter(name: str, value: Any, index: int) -> Any:
    """Coerce a number-kind parameter given as text.

    Integral text becomes an int, other numeric text a float. Numbers pass
    through unchanged.

    Raises:
        ParameterError: If ``value`` is not a finite number.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                number = None
    else:
        number = None

    if number is None or (isinstance(number, float) and not math.isfinite(number)):
        raise ParameterError(
            f'Parameter "{name}" must be a number',
            details={"parameter": name, "value": value, "item_index": index}
        )
    return number
