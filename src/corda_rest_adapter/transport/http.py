"""HTTP transport backed by requests.

Each call goes through ``requests.request`` directly; no Session is kept, so
connections are not pooled between records or batches.
"""
import json
import os
from typing import Any, Dict, List

import requests

from ..config import settings
from ..errors import RemoteApiError, TransportFailure
from ..schemas import RequestDescriptor
from .base import Transport


class RequestsTransport(Transport):
    """Transport issuing real HTTP calls.

    Example:
        >>> transport = RequestsTransport(timeout=10.0)
        >>> body = transport.send(descriptor)
    """

    def __init__(self, timeout: float | None = None):
        """Initialize the transport.

        Args:
            timeout: Per-request timeout in seconds (default: from settings)
        """
        self._timeout = timeout if timeout is not None else settings.request_timeout_seconds

    @property
    def timeout(self) -> float:
        return self._timeout

    def send(self, request: RequestDescriptor) -> Any:
        kwargs: Dict[str, Any] = {
            "headers": dict(request.headers),
            "timeout": self._timeout,
        }
        opened: List[Any] = []
        try:
            if request.body_encoding == "multipart":
                kwargs["files"] = self._multipart(request, opened)
            elif request.body_encoding == "json_text":
                kwargs["data"] = request.body.encode("utf-8")
            elif request.body_encoding == "json":
                # Serialized here: requests drops json=None from the wire.
                kwargs["data"] = json.dumps(request.body).encode("utf-8")

            response = requests.request(request.method, request.url, **kwargs)
        except requests.exceptions.Timeout as e:
            raise TransportFailure(
                f"Request to {request.url} exceeded timeout of {self._timeout}s: {e}",
                details={"url": request.url, "timeout_seconds": self._timeout}
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportFailure(
                f"Request to {request.url} failed: {e}",
                details={"url": request.url}
            ) from e
        finally:
            for handle in opened:
                handle.close()

        if not response.ok:
            body = self._error_body(response)
            raise RemoteApiError(
                self._error_message(response, body),
                status_code=response.status_code,
                body=body,
                details={"url": request.url, "method": request.method}
            )

        return self._decode(response, request.response_type)

    def _multipart(self, request: RequestDescriptor, opened: List[Any]) -> Dict[str, Any]:
        """Build the ``files`` argument; file fields are read from disk."""
        files: Dict[str, Any] = {}
        for name, value in (request.form_data or {}).items():
            if name in request.file_fields:
                try:
                    handle = open(value, "rb")
                except OSError as e:
                    raise TransportFailure(
                        f"Cannot read upload file {value}: {e}",
                        details={"field": name, "path": str(value)}
                    ) from e
                opened.append(handle)
                files[name] = (os.path.basename(str(value)), handle)
            else:
                files[name] = (None, str(value))
        return files

    @staticmethod
    def _decode(response: requests.Response, response_type: str) -> Any:
        if response_type == "binary":
            return response.content
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_body(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _error_message(response: requests.Response, body: Any) -> str:
        detail = None
        if isinstance(body, dict):
            detail = body.get("message") or body.get("error")
        if not detail:
            detail = response.reason or "no details"
        return f"Gateway returned HTTP {response.status_code}: {detail}"
