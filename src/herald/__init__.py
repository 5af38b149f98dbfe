"""Herald: typed request/response adapters for async HTTP handlers."""

from .asgi import ASGIAdapter
from .body import BodyReader, LimitedReader
from .capabilities import SizeLimited, StatusCoded, Validatable
from .config import AdapterConfig
from .exceptions import (
    BodyTooLargeError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    ErrorEnvelope,
    FormParseError,
    HeraldError,
    HTTPError,
    ValidationError,
)
from .forms import FormDecoder, weak_decode, zero_value
from .handlers import error_handler, form_handler, json_handler
from .http import Status
from .middleware import (
    ContentSecurityPolicyOptions,
    Middleware,
    VanityImportOptions,
    chain,
    content_security_policy,
    no_clickjacking,
    vanity_imports,
    versioned_assets,
)
from .requests import Request
from .responses import Handler, Response, ResponseWriter
from .testing import TestClient

__all__ = [
    "ASGIAdapter",
    "AdapterConfig",
    "BodyReader",
    "BodyTooLargeError",
    "ConfigurationError",
    "ContentSecurityPolicyOptions",
    "DecodeError",
    "EncodeError",
    "ErrorEnvelope",
    "FormDecoder",
    "FormParseError",
    "HTTPError",
    "Handler",
    "HeraldError",
    "LimitedReader",
    "Middleware",
    "Request",
    "Response",
    "ResponseWriter",
    "SizeLimited",
    "Status",
    "StatusCoded",
    "TestClient",
    "Validatable",
    "ValidationError",
    "VanityImportOptions",
    "chain",
    "content_security_policy",
    "error_handler",
    "form_handler",
    "json_handler",
    "no_clickjacking",
    "vanity_imports",
    "versioned_assets",
    "weak_decode",
    "zero_value",
]
