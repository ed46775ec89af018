"""Request construction for gateway operations.

``build_request`` is a pure function of (template, parameter values,
credentials): the same inputs always produce an equal RequestDescriptor.
Parameter values reaching this module have already been read and parsed by
the executor; nothing here touches the network or the parameter source.

Flow:
  1. Percent-encode path identifiers into the path pattern
  2. Form-encode query fields in declared order and append them to the URL
  3. Shape the payload (JSON object, whole-body parameter, JSON text, multipart)
  4. Derive headers, Authorization first
"""
import json
from typing import Any, Dict, Mapping, Tuple
from urllib.parse import quote, urlencode

from .credentials import Credentials, basic_auth_header
from .operations import BodyEncoding, OperationTemplate
from .schemas import RequestDescriptor

JSON_CONTENT_TYPE = "application/json"

# Characters encodeURIComponent leaves alone besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_path_segment(value: Any) -> str:
    """Percent-encode one path identifier.

    ``/``, ``=``, ``,`` and spaces are all escaped so an identifier can never
    change the shape of the path.
    """
    return quote(str(value), safe=_URI_COMPONENT_SAFE)


def format_query_value(value: Any) -> str:
    """Render a query value the way the gateway expects.

    Integral floats lose their fractional part (``100.0`` -> ``"100"``),
    booleans are lower-cased.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_headers(credentials: Credentials, content_type: str | None = None) -> Dict[str, str]:
    headers = {"Authorization": basic_auth_header(credentials)}
    if content_type:
        headers["Content-Type"] = content_type
    return headers


def build_url(
    template: OperationTemplate,
    values: Mapping[str, Any],
    credentials: Credentials
) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
    """Return the full URL and the query pairs it carries."""
    path = template.path.format(
        **{name: encode_path_segment(values[name]) for name in template.path_params}
    )
    url = f"{credentials.base_url}{path}"

    query = tuple(
        (name, format_query_value(values[name])) for name in template.query_fields
    )
    if query:
        url = f"{url}?{urlencode(query)}"
    return url, query


def build_request(
    template: OperationTemplate,
    values: Mapping[str, Any],
    credentials: Credentials
) -> RequestDescriptor:
    """Build the RequestDescriptor for one record.

    Args:
        template: Operation template from the catalog
        values: Parameter values for the record, JSON parameters already parsed
        credentials: Credentials resolved for the current executor call

    Returns:
        A new RequestDescriptor; never shared between records.

    Raises:
        KeyError: If ``values`` lacks a parameter the template uses.
    """
    url, query = build_url(template, values, credentials)
    encoding = template.body_encoding

    if encoding is BodyEncoding.JSON:
        if template.body_param is not None:
            body: Any = values[template.body_param]
        else:
            body = {name: values[name] for name in template.body_fields}
        return RequestDescriptor(
            method=template.method,
            url=url,
            headers=build_headers(credentials, JSON_CONTENT_TYPE),
            body=body,
            query=query,
            response_type=template.response_type.value,
            body_encoding=encoding.value,
        )

    if encoding is BodyEncoding.JSON_TEXT:
        # Sent as an already-serialized string, not a structured body.
        text = json.dumps({name: values[name] for name in template.body_fields})
        return RequestDescriptor(
            method=template.method,
            url=url,
            headers=build_headers(credentials, JSON_CONTENT_TYPE),
            body=text,
            query=query,
            response_type=template.response_type.value,
            body_encoding=encoding.value,
        )

    if encoding is BodyEncoding.MULTIPART:
        # Content-Type (with boundary) is left to the transport.
        form_data = {field: values[param] for field, param in template.form_fields}
        return RequestDescriptor(
            method=template.method,
            url=url,
            headers=build_headers(credentials),
            query=query,
            form_data=form_data,
            file_fields=template.file_fields,
            response_type=template.response_type.value,
            body_encoding=encoding.value,
        )

    return RequestDescriptor(
        method=template.method,
        url=url,
        headers=build_headers(credentials),
        query=query,
        response_type=template.response_type.value,
        body_encoding=encoding.value,
    )
