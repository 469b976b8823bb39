# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the PocketBase record store client."""

import json

import httpx
import pytest

from src.core.errors import (
    AuthError,
    ConflictError,
    RecordNotFoundError,
    TransportError,
    ValidationError,
)
from src.infrastructure.record_store import PocketBaseClient, filters


def make_client(handler, token="tok", page_size=500):
    """Client whose HTTP layer is answered by ``handler``."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://pb.test")
    return PocketBaseClient(http, token=token, page_size=page_size)


class TestRecordRequests:
    """Tests for record CRUD over HTTP."""

    @pytest.mark.asyncio
    async def test_list_follows_pages(self):
        """Pages are fetched until one comes back short."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(dict(request.url.params))
            page = int(request.url.params["page"])
            items = [{"id": "a"}, {"id": "b"}] if page == 1 else [{"id": "c"}]
            return httpx.Response(200, json={"page": page, "items": items})

        client = make_client(handler, page_size=2)
        records = await client.list("classes", filter="is_active=true", sort="display_order")

        assert [r["id"] for r in records] == ["a", "b", "c"]
        assert [p["page"] for p in seen] == ["1", "2"]
        assert seen[0]["perPage"] == "2"
        assert seen[0]["filter"] == "is_active=true"
        assert seen[0]["sort"] == "display_order"
        assert seen[0]["skipTotal"] == "1"

    @pytest.mark.asyncio
    async def test_count_reads_total(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/collections/teacher_classes/records"
            assert request.url.params["perPage"] == "1"
            return httpx.Response(200, json={"items": [{"id": "x"}], "totalItems": 7})

        client = make_client(handler)

        assert await client.count("teacher_classes", filters.eq("teacher_id", "t1")) == 7

    @pytest.mark.asyncio
    async def test_create_sends_token_and_body(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["auth"] = request.headers.get("Authorization")
            captured["method"] = request.method
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "u1", **captured["body"]})

        client = make_client(handler)
        record = await client.create("users", {"email": "a@b.c"})

        assert record["id"] == "u1"
        assert captured == {
            "auth": "Bearer tok",
            "method": "POST",
            "body": {"email": "a@b.c"},
        }

    @pytest.mark.asyncio
    async def test_update_uses_patch(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PATCH"
            assert request.url.path == "/api/collections/users/records/u1"
            return httpx.Response(200, json={"id": "u1", "is_active": False})

        record = await make_client(handler).update("users", "u1", {"is_active": False})

        assert record["is_active"] is False

    @pytest.mark.asyncio
    async def test_delete_no_content(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DELETE"
            return httpx.Response(204)

        assert await make_client(handler).delete("users", "u1") is None

    @pytest.mark.asyncio
    async def test_no_token_no_header(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert "Authorization" not in request.headers
            return httpx.Response(200, json={"id": "g1"})

        client = make_client(handler, token=None)
        await client.get("classes", "g1")

    @pytest.mark.asyncio
    async def test_with_token(self):
        client = make_client(lambda r: httpx.Response(200, json={}))
        other = client.with_token("other")

        assert other.token == "other"
        assert client.token == "tok"


class TestErrorMapping:
    """Tests for translating store failures into portal errors."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, body, error_type",
        [
            (404, {"message": "The requested resource wasn't found."}, RecordNotFoundError),
            (401, {"message": "The request requires valid record authorization token."}, AuthError),
            (403, {"message": "Only admins can perform this action."}, AuthError),
            (409, {"message": "Conflict"}, ConflictError),
            (
                400,
                {"message": "Failed to create record.", "data": {"email": {"code": "validation_not_unique", "message": "Value must be unique."}}},
                ConflictError,
            ),
            (
                400,
                {"message": "Failed to create record.", "data": {"grade": {"code": "validation_required", "message": "Missing required value."}}},
                ValidationError,
            ),
            (500, {"message": "Something went wrong."}, TransportError),
            (502, "bad gateway", TransportError),
        ],
    )
    async def test_status_mapping(self, status_code, body, error_type):
        def handler(request: httpx.Request) -> httpx.Response:
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, json=body)

        with pytest.raises(error_type):
            await make_client(handler).create("users", {"email": "a@b.c"})

    @pytest.mark.asyncio
    async def test_forbidden_keeps_status(self):
        client = make_client(lambda r: httpx.Response(403, json={"message": "Forbidden"}))

        with pytest.raises(AuthError) as exc_info:
            await client.get("users", "u1")

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_validation_details(self):
        field_errors = {"section_id": {"code": "validation_missing_rel_records", "message": "bad"}}
        client = make_client(
            lambda r: httpx.Response(400, json={"message": "Failed to create record.", "data": field_errors})
        )

        with pytest.raises(ValidationError) as exc_info:
            await client.create("user_profiles", {})

        assert exc_info.value.details["fields"] == field_errors

    @pytest.mark.asyncio
    async def test_network_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError, match="unreachable"):
            await make_client(handler).list("classes")


class TestAuthRequests:
    """Tests for the auth endpoints."""

    @pytest.mark.asyncio
    async def test_auth_with_password(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/collections/users/auth-with-password"
            assert json.loads(request.content) == {"identity": "a@b.c", "password": "pw"}
            return httpx.Response(200, json={"token": "new", "record": {"id": "u1"}})

        response = await make_client(handler, token=None).auth_with_password("a@b.c", "pw")

        assert response["token"] == "new"

    @pytest.mark.asyncio
    async def test_bad_credentials_are_auth_errors(self):
        client = make_client(
            lambda r: httpx.Response(400, json={"message": "Failed to authenticate.", "data": {}})
        )

        with pytest.raises(AuthError, match="Invalid email or password"):
            await client.auth_with_password("a@b.c", "wrong")

    @pytest.mark.asyncio
    async def test_auth_refresh(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/collections/users/auth-refresh"
            assert request.headers["Authorization"] == "Bearer tok"
            return httpx.Response(200, json={"token": "fresh", "record": {"id": "u1"}})

        response = await make_client(handler).auth_refresh()

        assert response["token"] == "fresh"


class TestFilters:
    """Tests for filter expression helpers."""

    def test_literals_are_quoted_and_escaped(self):
        assert filters.eq("name", "O'Brien") == "name='O\\'Brien'"
        assert filters.eq("path", "a\\b") == "path='a\\\\b'"
        assert filters.eq("is_active", True) == "is_active=true"
        assert filters.eq("order", 3) == "order=3"
        assert filters.eq("deleted_at", None) == "deleted_at=null"

    def test_operators(self):
        assert filters.neq("role", "admin") == "role!='admin'"
        assert filters.contains("tags", "x") == "tags~'x'"

    def test_joins_skip_empty_parts(self):
        assert filters.and_(filters.eq("a", 1), None, "") == "a=1"
        assert filters.and_(filters.eq("a", 1), filters.eq("b", 2)) == "(a=1 && b=2)"
        assert filters.or_(filters.eq("a", 1), filters.eq("b", 2)) == "(a=1 || b=2)"
        assert filters.and_() == ""
