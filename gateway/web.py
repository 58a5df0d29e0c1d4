"""HTTP front door for the public registration form."""

from __future__ import annotations

import json
import logging
from typing import Final

import discord
from aiohttp import web

from registration import Application, RegistrationError, RegistrationIntake

log: Final = logging.getLogger("registration-gateway")

INTAKE_KEY: Final = web.AppKey("intake", RegistrationIntake)
CLIENT_KEY: Final = web.AppKey("discord_client", discord.Client)

CORS_HEADERS: Final[dict[str, str]] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _json(message: str, *, status: int) -> web.Response:
    return web.json_response({"message": message}, status=status)


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    if request.method == "OPTIONS":
        response: web.StreamResponse = web.Response(status=204)
    else:
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            exc.headers.update(CORS_HEADERS)
            raise
    response.headers.update(CORS_HEADERS)
    return response


def make_logging_middleware(*, verbose: bool = False):
    level = logging.INFO if verbose else logging.DEBUG

    @web.middleware
    async def logging_middleware(request: web.Request, handler) -> web.StreamResponse:
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            log.log(level, "%s %s -> %s", request.method, request.path, exc.status)
            raise
        log.log(level, "%s %s -> %s", request.method, request.path, response.status)
        return response

    return logging_middleware


async def register(request: web.Request) -> web.Response:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _json("Request body must be valid JSON.", status=400)

    intake = request.app[INTAKE_KEY]
    try:
        application = Application.from_payload(payload)
        accepted = await intake.submit(application)
    except RegistrationError as exc:
        return _json(exc.message, status=exc.status)
    except Exception as exc:  # pylint: disable=broad-except
        log.exception("Error processing registration: %s", exc)
        return _json("An internal server error occurred.", status=500)

    return _json(accepted.message, status=200)


async def health(request: web.Request) -> web.Response:
    client = request.app.get(CLIENT_KEY)
    ready = bool(client is not None and client.is_ready())
    return web.json_response({"status": "ok", "discord_ready": ready})


def create_web_app(
    intake: RegistrationIntake,
    *,
    client: discord.Client | None = None,
    verbose_logging: bool = False,
) -> web.Application:
    app = web.Application(
        middlewares=[make_logging_middleware(verbose=verbose_logging), cors_middleware]
    )
    app[INTAKE_KEY] = intake
    if client is not None:
        app[CLIENT_KEY] = client
    app.router.add_post("/register", register)
    app.router.add_get("/health", health)
    return app


async def start_web_server(
    app: web.Application, *, host: str, port: int
) -> web.AppRunner:
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    log.info("Server is running on http://%s:%s", host, port)
    return runner
