"""
Tests for the permission gate in front of mutating routes.

The gate runs before the route body: a request that is not admitted
never reaches a service, and the stores are left untouched.
"""

from unittest.mock import MagicMock

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from book_service.errors import UpstreamUnavailableError
from book_service.main import create_app
from book_service.permissions import Permission, PermissionChecker
from book_service.store import BookStore
from book_service.store.memory import MemoryBookStore, MemoryStockStore
from tests.conftest import LIBRARIAN_TOKEN, NOBODY_TOKEN, READER_TOKEN, auth

BOOKS_URL = "/api/v1/books"
NEW_BOOK = {"id": "1", "title": "Go Programming", "author": "John Doe"}


@pytest.fixture
def mock_gate() -> MagicMock:
    return MagicMock(spec=PermissionChecker)


@pytest.fixture
def spy_store() -> MagicMock:
    """A memory book store whose calls can be asserted on."""
    return MagicMock(spec=BookStore, wraps=MemoryBookStore())


@pytest.fixture
def gated_client(settings, mock_gate, spy_store):
    """Client over an app whose gate is a mock."""
    app = create_app(
        settings,
        book_store=spy_store,
        stock_store=MemoryStockStore(),
        permission_checker=mock_gate,
    )
    with TestClient(app) as test_client:
        yield test_client


class TestMissingToken:
    def test_missing_token_is_401(self, gated_client, mock_gate, spy_store):
        response = gated_client.post(f"{BOOKS_URL}/new", json=NEW_BOOK)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        mock_gate.check_permissions.assert_not_called()
        spy_store.save_book.assert_not_called()

    def test_blank_token_is_401(self, gated_client, mock_gate):
        response = gated_client.delete(f"{BOOKS_URL}/1", headers={"Authorization": "  "})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        mock_gate.check_permissions.assert_not_called()


class TestDenied:
    def test_denied_create_never_reaches_store(self, gated_client, mock_gate, spy_store):
        """A caller without MANAGE_BOOKS gets 403 and nothing is stored."""
        mock_gate.check_permissions.return_value = False

        response = gated_client.post(f"{BOOKS_URL}/new", json=NEW_BOOK, headers=auth("t"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["kind"] == "permission_denied"
        mock_gate.check_permissions.assert_called_once_with("t", Permission.MANAGE_BOOKS)
        spy_store.save_book.assert_not_called()

    def test_token_is_forwarded_verbatim(self, gated_client, mock_gate):
        mock_gate.check_permissions.return_value = True

        gated_client.delete(f"{BOOKS_URL}/1", headers=auth("Bearer abc.def"))

        mock_gate.check_permissions.assert_called_once_with(
            "Bearer abc.def", Permission.MANAGE_BOOKS
        )

    def test_admitted_create_reaches_store(self, gated_client, mock_gate, spy_store):
        mock_gate.check_permissions.return_value = True

        response = gated_client.post(f"{BOOKS_URL}/new", json=NEW_BOOK, headers=auth("t"))

        assert response.status_code == status.HTTP_201_CREATED
        spy_store.save_book.assert_called_once()


class TestUpstreamUnavailable:
    def test_gate_failure_is_502(self, gated_client, mock_gate, spy_store):
        """An unanswerable permission check fails closed, as a server error."""
        mock_gate.check_permissions.side_effect = UpstreamUnavailableError("user service down")

        response = gated_client.post(f"{BOOKS_URL}/new", json=NEW_BOOK, headers=auth("t"))

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json()["kind"] == "upstream_unavailable"
        spy_store.save_book.assert_not_called()


class TestStaticGateOverHttp:
    """Role tokens from conftest against the real static gate."""

    @pytest.mark.parametrize("token", [NOBODY_TOKEN, READER_TOKEN, "unknown-token"])
    def test_create_book_forbidden(self, client, book_store, token):
        response = client.post(f"{BOOKS_URL}/new", json=NEW_BOOK, headers=auth(token))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert book_store.load_books("") == []

    def test_delete_forbidden_keeps_book(self, client, sample_book, book_store):
        book_store.save_book(sample_book)

        response = client.delete(f"{BOOKS_URL}/1", headers=auth(READER_TOKEN))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert book_store.load_book_by_id("1") == sample_book

    def test_update_forbidden_keeps_book(self, client, sample_book, book_store):
        book_store.save_book(sample_book)

        response = client.put(
            f"{BOOKS_URL}/1", json={"title": "Defaced"}, headers=auth(NOBODY_TOKEN)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert book_store.load_book_by_id("1") == sample_book

    def test_librarian_allowed(self, client):
        response = client.post(f"{BOOKS_URL}/new", json=NEW_BOOK, headers=auth(LIBRARIAN_TOKEN))

        assert response.status_code == status.HTTP_201_CREATED
