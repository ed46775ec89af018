"""Mock transport for testing.

Returns predefined responses without making network calls and records every
request it receives.
"""
from typing import Any, Callable, List, Optional, Sequence

from ..schemas import RequestDescriptor
from .base import Transport


class MockTransport(Transport):
    """Mock transport for testing.

    Example:
        >>> transport = MockTransport(response={"states": []})
        >>> transport.send(descriptor)
        {'states': []}
        >>> len(transport.calls)
        1
    """

    def __init__(
        self,
        response: Any = None,
        responses: Optional[Sequence[Any]] = None,
        error: Optional[Exception] = None,
        handler: Optional[Callable[[RequestDescriptor], Any]] = None
    ):
        """Initialize mock transport.

        Args:
            response: Body returned for every call
            responses: Bodies returned in order, one per call; an Exception
                      entry is raised instead of returned
            error: If set, raised on every call
            handler: If set, called with the request to produce the body
        """
        self._response = {} if response is None else response
        self._responses = list(responses) if responses is not None else None
        self._error = error
        self._handler = handler
        self.calls: List[RequestDescriptor] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def send(self, request: RequestDescriptor) -> Any:
        self.calls.append(request)
        if self._error is not None:
            raise self._error
        if self._handler is not None:
            return self._handler(request)
        if self._responses is not None:
            result = self._responses[len(self.calls) - 1]
            if isinstance(result, Exception):
                raise result
            return result
        return self._response
