"""Minimal Herald service.

Serve it with any ASGI server, for example ``uvicorn example:app``. It
exposes a JSON greeting endpoint at ``/greet``, a form endpoint at
``/signup`` and a health check at ``/health``, behind the security header
middleware.
"""

from __future__ import annotations

import msgspec

from herald import (
    ASGIAdapter,
    HTTPError,
    Request,
    ResponseWriter,
    Status,
    chain,
    content_security_policy,
    error_handler,
    form_handler,
    json_handler,
    no_clickjacking,
)
from herald.responses import Handler


class GreetRequest(msgspec.Struct):
    name: str = ""

    def max_size_bytes(self) -> int:
        return 4096

    def validate(self) -> None:
        if len(self.name) > 64:
            raise ValueError("name is too long")


class Greeting(msgspec.Struct):
    message: str


class SignupForm(msgspec.Struct):
    email: str
    newsletter: bool = False
    topics: list[str] = []

    def validate(self) -> None:
        if "@" not in self.email:
            raise ValueError("email looks wrong")


async def greet(writer: ResponseWriter, request: Request, body: GreetRequest) -> Greeting:
    if not body.name:
        raise HTTPError(Status.BAD_REQUEST, "name is required")
    return Greeting(message=f"Hello {body.name}")


async def signup(writer: ResponseWriter, request: Request, form: SignupForm) -> None:
    writer.redirect("/", Status.SEE_OTHER)


async def health(writer: ResponseWriter, request: Request) -> None:
    writer.write("ok")


def create_handler() -> Handler:
    """Dispatch on path to the adapted endpoints."""

    routes: dict[str, Handler] = {
        "/greet": json_handler(greet),
        "/signup": form_handler(signup),
        "/health": error_handler(health),
    }

    async def not_found(writer: ResponseWriter, request: Request) -> None:
        raise HTTPError(Status.NOT_FOUND)

    fallback = error_handler(not_found)

    async def dispatch(writer: ResponseWriter, request: Request) -> None:
        await routes.get(request.path, fallback)(writer, request)

    return chain(no_clickjacking, content_security_policy())(dispatch)


app = ASGIAdapter(create_handler())
