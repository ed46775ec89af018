"""Base class for transports.

A transport executes exactly one RequestDescriptor and either returns the
decoded response body or raises a RecordError subclass. Transports never
retry.
"""
from abc import ABC, abstractmethod
from typing import Any

from ..schemas import RequestDescriptor


class Transport(ABC):
    """Abstract base class for transports.

    Key Requirements:
    - Return the decoded body: parsed JSON for ``response_type == "json"``,
      raw ``bytes`` for ``"binary"``
    - Raise RemoteApiError when the gateway answers with an error status
    - Raise TransportFailure when there is no structured response
    - Must not log the Authorization header
    """

    @abstractmethod
    def send(self, request: RequestDescriptor) -> Any:
        """Execute the request and return the decoded response body.

        Raises:
            RemoteApiError: Gateway returned a non-2xx status
            TransportFailure: Connection, timeout or local I/O failure
        """
        pass
