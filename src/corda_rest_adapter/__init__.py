"""REST client adapter for Corda node gateways."""
from .credentials import Credentials
from .errors import StructuredError
from .operations import Resource
from .parameters import RecordParameterSource
from .router import ResourceRouter
from .schemas import OutputRecord, RequestDescriptor

__all__ = [
    "Credentials",
    "OutputRecord",
    "RecordParameterSource",
    "RequestDescriptor",
    "Resource",
    "ResourceRouter",
    "StructuredError",
]
