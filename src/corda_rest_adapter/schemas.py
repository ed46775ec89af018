from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .credentials import Credentials


@dataclass(frozen=True)
class RequestDescriptor:
    """Everything needed to issue one outbound call.

    ``url`` already carries the encoded query string; ``query`` keeps the
    same pairs for inspection. At most one of ``body`` and ``form_data`` is
    set. ``body_encoding`` tells the transport how to put ``body`` on the
    wire: ``json`` bodies are always serialized, even when the value is a
    string or ``None``, and only ``json_text`` bodies are sent verbatim.
    """
    method: str
    url: str
    headers: Dict[str, str]
    body: Any = None
    query: Tuple[Tuple[str, str], ...] = ()
    form_data: Optional[Dict[str, Any]] = None
    file_fields: Tuple[str, ...] = ()
    response_type: str = "json"
    body_encoding: str = "none"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
            "response_type": self.response_type,
            "body_encoding": self.body_encoding,
        }
        if self.body_encoding in ("json", "json_text"):
            data["body"] = self.body
        if self.query:
            data["query"] = dict(self.query)
        if self.form_data is not None:
            data["formData"] = dict(self.form_data)
        return data


@dataclass(frozen=True)
class OutputRecord:
    """Normalized result of one input record.

    ``json`` is the response body on success or ``{"error": message}`` when
    the failure was captured under continue-on-failure.
    """
    json: Any
    item: int
    error: bool = field(default=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"json": self.json, "pairedItem": {"item": self.item}}


class ExecuteRequest(BaseModel):
    resource: str = Field(..., min_length=1)
    operation: str = Field(..., min_length=1)
    parameters: Dict[str, Any] = Field(default_factory=dict)
    records: List[Dict[str, Any]] = Field(default_factory=lambda: [{}], min_length=1)
    continue_on_fail: bool = False
    credentials: Optional[Credentials] = None


class ExecuteResponse(BaseModel):
    results: List[Dict[str, Any]]
    trace_id: str
    failed: int = 0
