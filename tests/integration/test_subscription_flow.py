"""
Integration tests for the subscribe and confirm flow.

Tests the full double opt-in flow through the API with a real database.
Outbound email is captured by an in-memory sender.
Requires PostgreSQL to be running (via docker-compose).
"""

import re
from datetime import UTC, datetime
from urllib.parse import urlsplit

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from src.adapters.clock import SystemClock
from src.api.main import app
from src.config.settings import get_settings
from src.domain.exceptions import DeliveryFault
from tests.doubles import RecordingEmailSender, SentEmail

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}
VALID_BODY = "name=le%20guin&email=ursula_le_guin%40gmail.com"


@pytest.fixture
def client(pool: ConnectionPool, email_sender: RecordingEmailSender) -> TestClient:
    """Create test client with real database connection and captured email."""
    app.state.settings = get_settings()
    app.state.pool = pool
    app.state.email_sender = email_sender
    app.state.clock = SystemClock()
    return TestClient(app)


def post_subscriptions(client: TestClient, body: str):
    return client.post("/v1/subscriptions", content=body, headers=FORM_HEADERS)


def confirmation_links(message: SentEmail) -> tuple[str, str]:
    """Extract the (html, text) confirmation links from a captured email."""

    def only_link(body: str) -> str:
        links = re.findall(r"https?://[^\s\"<>]+", body)
        assert len(links) == 1, f"Expected one link in {body!r}"
        return links[0]

    return only_link(message.html_body), only_link(message.text_body)


def follow(client: TestClient, link: str):
    parts = urlsplit(link)
    return client.get(f"{parts.path}?{parts.query}")


def fetch_all(pool: ConnectionPool) -> list[tuple]:
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute("SELECT email, name, status, subscribed_at FROM subscriptions")
        return cursor.fetchall()


class TestSubscribe:
    """Integration tests for POST /v1/subscriptions."""

    def test_subscribe_returns_200_and_persists_pending(
        self, client: TestClient, pool: ConnectionPool
    ) -> None:
        started = datetime.now(UTC)

        response = post_subscriptions(client, VALID_BODY)

        assert response.status_code == 200
        rows = fetch_all(pool)
        assert len(rows) == 1
        email, name, status, subscribed_at = rows[0]
        assert email == "ursula_le_guin@gmail.com"
        assert name == "le guin"
        assert status == "pending_confirmation"
        assert subscribed_at >= started

    def test_subscribe_sends_one_confirmation_email(
        self, client: TestClient, email_sender: RecordingEmailSender
    ) -> None:
        post_subscriptions(client, VALID_BODY)

        assert len(email_sender.sent) == 1
        html_link, text_link = confirmation_links(email_sender.sent[0])
        assert html_link == text_link
        assert email_sender.sent[0].recipient == "ursula_le_guin@gmail.com"

    @pytest.mark.parametrize(
        ("body", "description"),
        [
            ("name=le%20guin", "missing the email"),
            ("email=ursula_le_guin%40gmail.com", "missing the name"),
            ("", "missing both name and email"),
            ("name=&email=ursula_le_guin%40gmail.com", "empty name"),
            ("name=Ursula&email=", "empty email"),
            ("name=&email=", "empty name and email"),
            ("name=Ursula&email=definitely-not-an-email", "invalid email"),
        ],
    )
    def test_subscribe_returns_400_and_stores_nothing(
        self,
        client: TestClient,
        pool: ConnectionPool,
        email_sender: RecordingEmailSender,
        body: str,
        description: str,
    ) -> None:
        response = post_subscriptions(client, body)

        assert response.status_code == 400, f"Expected 400 when the payload was {description}"
        assert fetch_all(pool) == []
        assert email_sender.sent == []

    def test_subscribe_existing_email_returns_400_and_changes_nothing(
        self, client: TestClient, pool: ConnectionPool
    ) -> None:
        post_subscriptions(client, VALID_BODY)
        before = fetch_all(pool)

        response = post_subscriptions(client, "name=Someone%20Else&email=ursula_le_guin%40gmail.com")

        assert response.status_code == 400
        assert fetch_all(pool) == before

    def test_subscribe_email_failure_returns_500_but_keeps_row(
        self, client: TestClient, pool: ConnectionPool
    ) -> None:
        class BrokenSender:
            def send(self, *args: str) -> None:
                raise DeliveryFault("email API down")

        app.state.email_sender = BrokenSender()

        response = post_subscriptions(client, VALID_BODY)

        assert response.status_code == 500
        assert len(fetch_all(pool)) == 1


class TestConfirm:
    """Integration tests for GET /v1/subscriptions/confirm."""

    def test_confirm_without_token_returns_400(self, client: TestClient) -> None:
        response = client.get("/v1/subscriptions/confirm")
        assert response.status_code == 400

    def test_confirm_unknown_token_returns_400_and_changes_nothing(
        self, client: TestClient, pool: ConnectionPool
    ) -> None:
        post_subscriptions(client, VALID_BODY)

        response = client.get("/v1/subscriptions/confirm", params={"token": "A" * 25})

        assert response.status_code == 400
        assert fetch_all(pool)[0][2] == "pending_confirmation"

    def test_link_returned_by_subscribe_returns_200(
        self, client: TestClient, email_sender: RecordingEmailSender
    ) -> None:
        post_subscriptions(client, VALID_BODY)
        html_link, _ = confirmation_links(email_sender.sent[0])

        response = follow(client, html_link)

        assert response.status_code == 200

    def test_clicking_link_confirms_subscriber(
        self, client: TestClient, pool: ConnectionPool, email_sender: RecordingEmailSender
    ) -> None:
        post_subscriptions(client, VALID_BODY)
        html_link, _ = confirmation_links(email_sender.sent[0])

        follow(client, html_link).raise_for_status()

        email, name, status, _ = fetch_all(pool)[0]
        assert email == "ursula_le_guin@gmail.com"
        assert name == "le guin"
        assert status == "confirmed"

    def test_clicking_link_twice_is_idempotent(
        self, client: TestClient, pool: ConnectionPool, email_sender: RecordingEmailSender
    ) -> None:
        post_subscriptions(client, VALID_BODY)
        html_link, _ = confirmation_links(email_sender.sent[0])

        first = follow(client, html_link)
        subscribed_at = fetch_all(pool)[0][3]
        second = follow(client, html_link)

        assert first.status_code == 200
        assert second.status_code == 200
        _, _, status, subscribed_at_after = fetch_all(pool)[0]
        assert status == "confirmed"
        assert subscribed_at_after == subscribed_at
