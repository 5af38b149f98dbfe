"""Typed handler adapters.

Each adapter wraps an application function and returns a plain
:data:`~herald.responses.Handler`. Request decoding, validation, invocation
and encoding run strictly in order; the first failing stage produces the
one response written for the request and nothing after it runs.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, TypeVar, get_type_hints

from .body import LimitedReader
from .capabilities import is_validatable, max_size_of, run_validation, status_code_of
from .codec import decode_json_body, encode_json_body, has_body
from .config import DEFAULT_CONFIG, AdapterConfig
from .exceptions import DecodeError, EncodeError, HeraldError, ValidationError, error_details, error_envelope
from .forms import FormDecoder, flatten_form, is_shape, zero_value
from .http import Status, is_server_error
from .requests import Request
from .responses import Handler, ResponseWriter

logger = logging.getLogger(__name__)

Req = TypeVar("Req")
Res = TypeVar("Res")

FormFunc = Callable[[ResponseWriter, Request, Req], Awaitable[None] | None]
JSONFunc = Callable[[ResponseWriter, Request, Req], Awaitable[Res] | Res]
ErrorFunc = Callable[[ResponseWriter, Request], Awaitable[None] | None]


def request_type_of(func: Callable[..., Any], explicit: type[Any] | None = None) -> type[Any]:
    """Return the request shape ``func`` expects as its third argument."""

    if explicit is not None:
        return explicit
    parameters = list(inspect.signature(func).parameters.values())
    if len(parameters) < 3:
        raise TypeError(f"{func!r} must accept (writer, request, value) to be adapted")
    hints = get_type_hints(func)
    annotation = hints.get(parameters[2].name)
    if annotation is None:
        raise TypeError(f"Cannot infer the request type of {func!r}; annotate it or pass request_type=")
    return annotation


async def _invoke(func: Callable[..., Any], *args: Any) -> Any:
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _validate(value: Any, wrap: Callable[[BaseException], ValidationError]) -> None:
    if not is_validatable(value):
        return
    try:
        run_validation(value)
    except Exception as exc:
        raise wrap(exc) from exc


def _log_rejection(request: Request, exc: HeraldError) -> None:
    logger.debug(
        "Rejected %s %s: %s",
        request.method,
        request.path,
        exc,
        extra=error_details(exc),
    )


def _log_failure(config: AdapterConfig, request: Request, status: int, exc: BaseException) -> None:
    if is_server_error(status) and config.log_server_errors:
        logger.error(
            "Handler for %s %s failed with status %d",
            request.method,
            request.path,
            status,
            exc_info=exc,
            extra=error_details(exc),
        )


def _write_envelope(writer: ResponseWriter, status: int, message: str, config: AdapterConfig) -> None:
    writer.set_header("content-type", config.json_content_type)
    writer.write_header(status)
    writer.write(error_envelope(message))


def _json_zero(model: type[Req]) -> tuple[Req | None, ValidationError | None]:
    """Build the empty-body value, or the rejection when the shape refuses it."""

    try:
        return zero_value(model), None
    except (TypeError, ValueError) as exc:
        return None, ValidationError.for_body(exc)


def _size_limit(model: type[Any], zero: Any) -> int | None:
    if zero is not None:
        return max_size_of(zero)
    # without an instance only a class-level max_size_bytes can be asked
    if isinstance(inspect.getattr_static(model, "max_size_bytes", None), (classmethod, staticmethod)):
        return max_size_of(model)
    return None


def form_handler(
    func: FormFunc[Req] | None = None,
    *,
    request_type: type[Req] | None = None,
    config: AdapterConfig | None = None,
) -> Any:
    """Adapt ``func(writer, request, value)`` where ``value`` is decoded from form data.

    Query parameters and URL-encoded bodies are weakly decoded into the
    request shape. Parse and decode failures answer 400 with the error
    message, a failed ``validate()`` answers 400 with ``invalid form: ...``.
    ``func`` writes its own response.

    Usable directly, as ``@form_handler`` or as ``@form_handler(config=...)``.
    """

    settings = config or DEFAULT_CONFIG

    def adapt(target: FormFunc[Req]) -> Handler:
        decoder = FormDecoder(request_type_of(target, request_type))

        async def handler(writer: ResponseWriter, request: Request) -> None:
            try:
                values = await request.form(
                    max_bytes=settings.max_form_bytes,
                    max_fields=settings.max_form_fields,
                )
                value = decoder.decode(flatten_form(values))
                _validate(value, ValidationError.for_form)
            except (DecodeError, ValidationError) as exc:
                _log_rejection(request, exc)
                writer.error(str(exc), exc.status_code())
                return
            try:
                await _invoke(target, writer, request, value)
            except Exception as exc:
                status = status_code_of(exc, int(Status.INTERNAL_SERVER_ERROR))
                _log_failure(settings, request, status, exc)
                writer.error(str(exc), status)

        handler.__name__ = getattr(target, "__name__", "form_handler")
        handler.__qualname__ = getattr(target, "__qualname__", handler.__name__)
        return handler

    if func is None:
        return adapt
    return adapt(func)


def json_handler(
    func: JSONFunc[Req, Res] | None = None,
    *,
    request_type: type[Req] | None = None,
    config: AdapterConfig | None = None,
) -> Any:
    """Adapt ``func(writer, request, value) -> response`` for JSON bodies.

    * A request shape with ``max_size_bytes()`` caps the body before any
      byte is read.
    * An empty body skips decoding and ``func`` gets the zero value. A shape
      whose ``__post_init__`` rejects its zero value answers such a request
      with 400 instead.
    * Exceptions raised by ``func`` become ``{"Error": message}`` with the
      status from the exception's ``status_code()``, or 500.
    * The response is encoded into a buffer before the status is written;
      its ``status_code()``, if any, replaces the default 200.
    """

    settings = config or DEFAULT_CONFIG

    def adapt(target: JSONFunc[Req, Res]) -> Handler:
        model = request_type_of(target, request_type)
        if not is_shape(model):
            raise TypeError(f"JSON request type must be a msgspec.Struct or dataclass, got {model!r}")
        _size_limit(model, _json_zero(model)[0])

        async def handler(writer: ResponseWriter, request: Request) -> None:
            value, rejection = _json_zero(model)
            limit = _size_limit(model, value)
            if limit is not None:
                request.body = LimitedReader(request.body, limit)
            try:
                if rejection is not None and not await has_body(request.body):
                    raise rejection
                value = await decode_json_body(request.body, model, default=value)
                _validate(value, ValidationError.for_body)
            except (DecodeError, ValidationError) as exc:
                _log_rejection(request, exc)
                _write_envelope(writer, exc.status_code(), str(exc), settings)
                return

            try:
                result = await _invoke(target, writer, request, value)
            except Exception as exc:
                status = status_code_of(exc, int(Status.INTERNAL_SERVER_ERROR))
                _log_failure(settings, request, status, exc)
                _write_envelope(writer, status, str(exc), settings)
                return

            try:
                body = encode_json_body(result)
            except EncodeError as exc:
                _log_failure(settings, request, exc.status_code(), exc)
                _write_envelope(writer, exc.status_code(), str(exc), settings)
                return

            writer.set_header("content-type", settings.json_content_type)
            writer.write_header(status_code_of(result, int(Status.OK)))
            writer.write(body)

        handler.__name__ = getattr(target, "__name__", "json_handler")
        handler.__qualname__ = getattr(target, "__qualname__", handler.__name__)
        return handler

    if func is None:
        return adapt
    return adapt(func)


def error_handler(
    func: ErrorFunc | None = None,
    *,
    config: AdapterConfig | None = None,
) -> Any:
    """Adapt ``func(writer, request)`` that writes its own success response.

    When ``func`` raises, the exception message is written as plain text with
    the status from its ``status_code()``, or 500. Unlike :func:`json_handler`
    the body is not wrapped in JSON.
    """

    settings = config or DEFAULT_CONFIG

    def adapt(target: ErrorFunc) -> Handler:
        async def handler(writer: ResponseWriter, request: Request) -> None:
            try:
                await _invoke(target, writer, request)
            except Exception as exc:
                status = status_code_of(exc, int(Status.INTERNAL_SERVER_ERROR))
                _log_failure(settings, request, status, exc)
                writer.error(str(exc), status)

        handler.__name__ = getattr(target, "__name__", "error_handler")
        handler.__qualname__ = getattr(target, "__qualname__", handler.__name__)
        return handler

    if func is None:
        return adapt
    return adapt(func)


__all__ = ["error_handler", "form_handler", "json_handler", "request_type_of"]
