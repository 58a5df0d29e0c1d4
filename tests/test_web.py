"""Tests for the aiohttp registration endpoint."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from aiohttp import test_utils

from gateway.web import create_web_app
from registration import (
    Accepted,
    ChannelUnavailable,
    DeliveryFailed,
    RateLimited,
)

PAYLOAD = {
    "fullName": "Ann",
    "age": "20",
    "email": "a@x.com",
    "ign": "Annx",
    "discordId": "U1",
}


def serve(app) -> test_utils.TestClient:
    return test_utils.TestClient(test_utils.TestServer(app))


def make_intake(**kwargs) -> MagicMock:
    intake = MagicMock()
    intake.submit = AsyncMock(**kwargs)
    return intake


class TestRegisterEndpoint:
    @pytest.mark.asyncio
    async def test_success_returns_200(self):
        intake = make_intake(return_value=Accepted(applicant_id="U1", message_id=1))
        async with serve(create_web_app(intake)) as client:
            resp = await client.post("/register", json=PAYLOAD)
            assert resp.status == 200
            assert await resp.json() == {"message": "Registration sent successfully!"}
            assert resp.headers["Access-Control-Allow-Origin"] == "*"

        application = intake.submit.await_args.args[0]
        assert application.applicant_id == "U1"
        assert application.full_name == "Ann"

    @pytest.mark.asyncio
    async def test_rate_limited_returns_429(self):
        intake = make_intake(side_effect=RateLimited(timedelta(hours=23, minutes=5)))
        async with serve(create_web_app(intake)) as client:
            resp = await client.post("/register", json=PAYLOAD)
            body = await resp.json()

        assert resp.status == 429
        assert "23h 5m" in body["message"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "message"),
        [
            (ChannelUnavailable(), "Discord channel not found."),
            (DeliveryFailed(), "An internal server error occurred."),
            (RuntimeError("unexpected"), "An internal server error occurred."),
        ],
    )
    async def test_failures_return_500(self, error, message):
        intake = make_intake(side_effect=error)
        async with serve(create_web_app(intake)) as client:
            resp = await client.post("/register", json=PAYLOAD)
            body = await resp.json()

        assert resp.status == 500
        assert body == {"message": message}

    @pytest.mark.asyncio
    async def test_invalid_json_returns_400(self):
        intake = make_intake()
        async with serve(create_web_app(intake)) as client:
            resp = await client.post(
                "/register",
                data="not json",
                headers={"Content-Type": "application/json"},
            )
            assert resp.status == 400

        intake.submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_fields_return_400(self):
        intake = make_intake()
        payload = {key: value for key, value in PAYLOAD.items() if key != "ign"}
        async with serve(create_web_app(intake)) as client:
            resp = await client.post("/register", json=payload)
            body = await resp.json()

        assert resp.status == 400
        assert "ign" in body["message"]
        intake.submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_nested_values_return_400(self):
        intake = make_intake()
        payload = {**PAYLOAD, "fullName": {"first": "Ann"}}
        async with serve(create_web_app(intake)) as client:
            resp = await client.post("/register", json=payload)
            body = await resp.json()

        assert resp.status == 400
        assert body == {"message": "Field 'fullName' must be a string."}
        intake.submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_cors_preflight(self):
        async with serve(create_web_app(make_intake())) as client:
            resp = await client.options(
                "/register",
                headers={
                    "Origin": "https://example.com",
                    "Access-Control-Request-Method": "POST",
                },
            )
            assert resp.status == 204
            assert resp.headers["Access-Control-Allow-Origin"] == "*"
            assert "POST" in resp.headers["Access-Control-Allow-Methods"]

    @pytest.mark.asyncio
    async def test_unknown_route_keeps_cors_headers(self):
        async with serve(create_web_app(make_intake())) as client:
            resp = await client.get("/nope")
            assert resp.status == 404
            assert resp.headers["Access-Control-Allow-Origin"] == "*"


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_reports_discord_readiness(self):
        bot = MagicMock(spec=discord.Client)
        bot.is_ready.return_value = True
        app = create_web_app(make_intake(), client=bot)
        async with serve(app) as client:
            resp = await client.get("/health")
            assert resp.status == 200
            assert await resp.json() == {"status": "ok", "discord_ready": True}

    @pytest.mark.asyncio
    async def test_without_client(self):
        async with serve(create_web_app(make_intake())) as client:
            resp = await client.get("/health")
            assert await resp.json() == {"status": "ok", "discord_ready": False}
