# mypy: ignore-errors
"""Tests for the crawler block-list, rate limit and CORS handling."""

import pytest
from fastapi import status

from solo_stage.main import is_blocked_bot
from solo_stage.services.kv import use_kv_client

GPTBOT_UA = "Mozilla/5.0 AppleWebKit/537.36 (KHTML, like Gecko; compatible; GPTBot/1.0)"


def test_robots_txt_served_to_blocked_bots(client) -> None:
    response = client.get("/robots.txt", headers={"User-Agent": GPTBOT_UA})

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/plain")
    assert "User-agent: GPTBot\nDisallow: /" in response.text
    assert "Crawl-delay: 10" in response.text


def test_blocked_bot_denied(client) -> None:
    response = client.get("/api/posts", headers={"User-Agent": GPTBOT_UA})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"detail": "Access denied"}


@pytest.mark.parametrize(
    ("user_agent", "blocked"),
    [
        ("CCBot/2.0 (https://commoncrawl.org/faq/)", True),
        ("Mozilla/5.0 (compatible; bytespider)", True),
        ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) Firefox/120.0", False),
        ("Mozilla/5.0 (compatible; Googlebot/2.1)", False),
        (None, False),
        ("", False),
    ],
)
def test_is_blocked_bot(user_agent, blocked) -> None:
    assert is_blocked_bot(user_agent) is blocked


def test_rate_limit_after_hundred_requests(client) -> None:
    headers = {"cf-connecting-ip": "203.0.113.7"}
    for _ in range(100):
        assert client.get("/health", headers=headers).status_code == status.HTTP_200_OK

    response = client.get("/health", headers=headers)

    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert response.json() == {"detail": "Too many requests"}
    assert response.headers["retry-after"] == "3600"

    other = client.get("/health", headers={"cf-connecting-ip": "203.0.113.8"})
    assert other.status_code == status.HTTP_200_OK


def test_rate_limit_fails_open_without_store(client) -> None:
    use_kv_client(None)
    headers = {"cf-connecting-ip": "203.0.113.7"}

    statuses = {client.get("/health", headers=headers).status_code for _ in range(105)}

    assert statuses == {status.HTTP_200_OK}


def test_cors_allows_configured_origin(client) -> None:
    response = client.get("/health", headers={"Origin": "http://localhost:8787"})

    assert response.headers["access-control-allow-origin"] == "http://localhost:8787"


def test_cors_ignores_other_origin(client) -> None:
    response = client.get("/health", headers={"Origin": "https://elsewhere.example"})

    assert response.status_code == status.HTTP_200_OK
    assert "access-control-allow-origin" not in response.headers


def test_cors_preflight(client) -> None:
    response = client.options(
        "/api/posts",
        headers={
            "Origin": "http://localhost:8787",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["access-control-allow-origin"] == "http://localhost:8787"


def test_admin_route_with_store_down(client) -> None:
    use_kv_client(None)

    response = client.post(
        "/api/posts",
        json={"content": "x"},
        headers={"Cookie": "session=" + "0" * 64},
    )

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
