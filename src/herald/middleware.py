"""Middleware that wraps a handler and either forwards or short-circuits."""

from __future__ import annotations

import html
import re
from string import Template
from typing import Callable, Iterable

import msgspec
from msgspec import structs

from .exceptions import ConfigurationError
from .http import Status
from .requests import Request
from .responses import Handler, ResponseWriter

Middleware = Callable[[Handler], Handler]


def chain(*middlewares: Middleware) -> Middleware:
    """Compose ``middlewares`` so that the first one listed runs first."""

    def apply(handler: Handler) -> Handler:
        for middleware in reversed(middlewares):
            handler = middleware(handler)
        return handler

    return apply


def no_clickjacking(next_handler: Handler) -> Handler:
    """Disallow frame embedding and enable XSS filtering in older browsers."""

    async def handler(writer: ResponseWriter, request: Request) -> None:
        writer.set_header("x-frame-options", "deny")
        writer.set_header("x-xss-protection", "1; mode=block")
        await next_handler(writer, request)

    return handler


class ContentSecurityPolicyOptions(msgspec.Struct):
    """Values for each Content-Security-Policy directive.

    Only values are given, never directive names or delimiters. Empty
    directives are left out of the header.
    """

    default_src: str = "'none'"
    child_src: str = ""
    connect_src: str = ""
    font_src: str = "'self'"
    frame_src: str = ""
    img_src: str = "'self'"
    manifest_src: str = ""
    media_src: str = ""
    object_src: str = ""
    script_src: str = "'self'"
    script_src_elem: str = ""
    script_src_attr: str = ""
    style_src: str = "'self'"
    style_src_elem: str = ""
    style_src_attr: str = ""
    worker_src: str = ""
    base_uri: str = ""
    sandbox: str = ""
    form_action: str = ""
    frame_ancestors: str = ""
    report_to: str = ""

    def header_value(self) -> str:
        parts = [f"{name} {value}; " for name, value in self.directives() if value]
        return "".join(parts).strip().removesuffix(";")

    def directives(self) -> Iterable[tuple[str, str]]:
        for attribute in _CSP_ORDER:
            yield attribute.replace("_", "-"), getattr(self, attribute)


_CSP_ORDER = (
    "default_src",
    "child_src",
    "connect_src",
    "font_src",
    "frame_src",
    "img_src",
    "manifest_src",
    "media_src",
    "object_src",
    "script_src",
    "script_src_elem",
    "script_src_attr",
    "style_src",
    "style_src_elem",
    "style_src_attr",
    "worker_src",
    "base_uri",
    "sandbox",
    "form_action",
    "frame_ancestors",
    "report_to",
)

_DEFAULT_CSP = ContentSecurityPolicyOptions()


def content_security_policy(
    configure: Callable[[ContentSecurityPolicyOptions], None] | None = None,
) -> Middleware:
    """Set a Content-Security-Policy header, strict by default.

    ``configure`` receives a fresh copy of the defaults on every request and
    may change any directive.
    """

    def middleware(next_handler: Handler) -> Handler:
        async def handler(writer: ResponseWriter, request: Request) -> None:
            options = structs.replace(_DEFAULT_CSP)
            if configure is not None:
                configure(options)
            writer.set_header("content-security-policy", options.header_value())
            await next_handler(writer, request)

        return handler

    return middleware


class VanityImportOptions(msgspec.Struct, frozen=True):
    """Where vanity module paths live and where their sources are hosted."""

    domain: str
    modules: tuple[str, ...]
    url_prefix: str


_VANITY_TEMPLATE = Template(
    """<!doctype html>
<html>
<head>
<meta name="go-import" content="$domain/$module git $prefix/$module">
<meta name="go-source" content="$domain/$module $prefix/$module $prefix/$module/tree/main{/dir} $prefix/$module/blob/main{/dir}/{file}#L{line}">
<meta http-equiv="refresh" content="0; url=$prefix/$module">
</head>
<body>
<a href="$prefix/$module">$domain/$module</a>
</body>
</html>
"""
)


def vanity_imports(options: VanityImportOptions) -> Middleware:
    """Answer ``go get`` for custom module paths and redirect browsers to the source.

    Raises :class:`ConfigurationError` when ``options`` cannot work.
    """

    if not options.domain:
        raise ConfigurationError("invalid domain")
    if not options.modules:
        raise ConfigurationError("no modules")
    if any(not module for module in options.modules):
        raise ConfigurationError("invalid module")
    if not options.url_prefix.startswith("http"):
        raise ConfigurationError("invalid URL prefix")
    prefix = options.url_prefix.removesuffix("/")
    modules = frozenset(options.modules)

    def middleware(next_handler: Handler) -> Handler:
        async def handler(writer: ResponseWriter, request: Request) -> None:
            parts = request.path.split("/")
            module = parts[1] if len(parts) > 1 else ""
            if module not in modules:
                await next_handler(writer, request)
                return
            query = request.query_params.get("go-get", [])
            if not query or query[0] != "1":
                writer.redirect(f"{prefix}/{module}", Status.PERMANENT_REDIRECT)
                return
            page = _VANITY_TEMPLATE.substitute(
                domain=html.escape(options.domain),
                module=html.escape(module),
                prefix=html.escape(prefix),
            )
            writer.set_header("content-type", "text/html; charset=utf-8")
            writer.write(page)

        return handler

    return middleware


# Matches versioned assets like "app.abc123.js".
_VERSIONED_ASSET = re.compile(r"^(?P<name>[^.]+)\.[a-z0-9]+(?P<extension>\.[a-z0-9]+)$")


def versioned_assets(next_handler: Handler) -> Handler:
    """Strip the version from paths like ``/app.abc123.js`` before forwarding."""

    async def handler(writer: ResponseWriter, request: Request) -> None:
        if _VERSIONED_ASSET.match(request.path):
            request.path = _VERSIONED_ASSET.sub(r"\g<name>\g<extension>", request.path)
        await next_handler(writer, request)

    return handler


__all__ = [
    "ContentSecurityPolicyOptions",
    "Middleware",
    "VanityImportOptions",
    "chain",
    "content_security_policy",
    "no_clickjacking",
    "vanity_imports",
    "versioned_assets",
]
