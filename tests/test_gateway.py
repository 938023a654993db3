"""Tests for the field update gateway and the document cache."""

import asyncio
import json

import httpx
import pytest

from prdstudio.domains.documents.schemas import DocumentResponse
from prdstudio.domains.table.cache import DocumentCache
from prdstudio.domains.table.exceptions import (
    CacheFetchError, DocumentMissingError, FieldUpdateError, FieldValidationError
)
from prdstudio.domains.table.gateway import FieldUpdateGateway


@pytest.fixture
def table_cache(api, project):
    return DocumentCache(api, project.id)


def document_json(**fields):
    data = {
        "id": 1,
        "title": "Checkout PRD",
        "project_id": 1,
        "status": "draft",
        "created_at": "2026-01-01T00:00:00Z",
        "updated_at": "2026-01-02T00:00:00Z",
    }
    data.update(fields)
    return DocumentResponse(**data).model_dump(mode="json", by_alias=True)


class TestDocumentCache:

    async def test_fetch_rows(self, table_cache, make_document):
        doc = await make_document("Checkout PRD", content="<p>one two three</p>")

        rows = await table_cache.fetch()

        assert [r.id for r in rows] == [doc["id"]]
        assert rows[0].custom["wordCount"] == 3
        assert rows[0].custom["estimatedReadTime"] == "1 min"
        assert rows[0].document.updated_at.tzinfo is not None
        assert table_cache.loaded

    async def test_observers(self, table_cache, make_document):
        await make_document("Checkout PRD")
        seen = []
        unsubscribe = table_cache.subscribe(lambda rows: seen.append(len(rows)))

        await table_cache.fetch()
        unsubscribe()
        await table_cache.fetch()

        assert seen == [1]

    async def test_fetch_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"message": "boom"}))
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            cache = DocumentCache(client, 1)

            with pytest.raises(CacheFetchError) as exc_info:
                await cache.fetch()

        assert exc_info.value.status_code == 500


class TestFieldUpdateGateway:

    async def test_sends_single_field(self, api, table_cache, make_document, sent_patches):
        """Test exactly one PATCH with only the changed field, then a cache refresh."""
        doc = await make_document("Checkout PRD")
        await table_cache.fetch()
        gateway = FieldUpdateGateway(api, table_cache)

        updated = await gateway.update_field(doc["id"], "status", "in-review")

        requests = sent_patches()
        assert len(requests) == 1
        assert json.loads(requests[0].content) == {"status": "in-review"}
        assert updated.status == "in-review"
        assert table_cache.fetch_count == 2
        assert table_cache.get(doc["id"]).document.status == "in-review"

    async def test_unchanged_value_is_skipped(self, api, table_cache, make_document, sent_patches):
        """Test committing the cached value sends no request."""
        doc = await make_document("Checkout PRD", tags=["UX"])
        await table_cache.fetch()
        gateway = FieldUpdateGateway(api, table_cache)

        await gateway.update_field(doc["id"], "status", "draft")
        await gateway.update_field(doc["id"], "tags", ["UX"])

        assert sent_patches() == []
        assert gateway.request_count == 0

    async def test_due_date_serialized(self, api, table_cache, make_document, sent_patches):
        from datetime import date

        doc = await make_document("Checkout PRD")
        await table_cache.fetch()
        gateway = FieldUpdateGateway(api, table_cache)

        await gateway.update_field(doc["id"], "dueDate", date(2026, 11, 1))

        assert json.loads(sent_patches()[0].content) == {"dueDate": "2026-11-01T00:00:00Z"}
        assert table_cache.get(doc["id"]).document.due_date.day == 1

    async def test_invalid_value_not_sent(self, api, table_cache, make_document, sent_patches):
        doc = await make_document("Checkout PRD")
        await table_cache.fetch()
        gateway = FieldUpdateGateway(api, table_cache)

        with pytest.raises(FieldValidationError):
            await gateway.update_field(doc["id"], "status", "done")

        assert sent_patches() == []

    async def test_read_only_field_rejected(self, api, table_cache):
        gateway = FieldUpdateGateway(api, table_cache)

        with pytest.raises(FieldValidationError):
            await gateway.update_field(1, "createdAt", "2026-01-01")

    async def test_missing_document(self, api, table_cache):
        gateway = FieldUpdateGateway(api, table_cache)

        with pytest.raises(DocumentMissingError) as exc_info:
            await gateway.update_field(9999, "status", "complete")

        assert exc_info.value.status_code == 404

    async def test_server_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"message": "db down"}))
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            gateway = FieldUpdateGateway(client, DocumentCache(client, 1))

            with pytest.raises(FieldUpdateError) as exc_info:
                await gateway.update_field(1, "status", "complete")

        assert exc_info.value.status_code == 500
        assert "db down" in str(exc_info.value)

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as client:
            gateway = FieldUpdateGateway(client, DocumentCache(client, 1))

            with pytest.raises(FieldUpdateError):
                await gateway.update_field(1, "status", "complete")

    async def test_refresh_failure_is_not_fatal(self):
        """Test a failed cache refresh after a successful PATCH still returns the document."""
        def handler(request):
            if request.method == "PATCH":
                return httpx.Response(200, json=document_json(status="complete"))
            return httpx.Response(503)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as client:
            gateway = FieldUpdateGateway(client, DocumentCache(client, 1))

            updated = await gateway.update_field(1, "status", "complete")

        assert updated.status == "complete"

    @pytest.mark.parametrize("value", [5, "Product", ["UX", 3]])
    async def test_malformed_tags_rejected(self, api, table_cache, value):
        """Test a non-list tags value is a validation error, not a crash."""
        gateway = FieldUpdateGateway(api, table_cache)

        with pytest.raises(FieldValidationError):
            await gateway.update_field(1, "tags", value)

    async def test_revert_while_update_in_flight(self, api, table_cache, make_document, sent_patches):
        """Test reverting a field while the first update is in flight ends with the reverted value."""
        doc = await make_document("Checkout PRD")
        await table_cache.fetch()
        gateway = FieldUpdateGateway(api, table_cache)

        await asyncio.gather(
            gateway.update_field(doc["id"], "status", "complete"),
            gateway.update_field(doc["id"], "status", "draft"),
        )

        assert [json.loads(r.content) for r in sent_patches()] == [{"status": "complete"}, {"status": "draft"}]
        response = await api.get(f"/api/documents/{doc['id']}")
        assert response.json()["status"] == "draft"
        assert table_cache.get(doc["id"]).document.status == "draft"

    async def test_unrefreshed_value_is_not_skipped(self):
        """Test a value sent while the cache could not refresh is compared against the sent value."""
        sent = []

        def handler(request):
            if request.method == "PATCH":
                sent.append(json.loads(request.content))
                return httpx.Response(200, json=document_json(**sent[-1]))
            if len(sent) == 0:
                return httpx.Response(200, json=[document_json(status="draft")])
            return httpx.Response(503)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test") as client:
            cache = DocumentCache(client, 1)
            await cache.fetch()
            gateway = FieldUpdateGateway(client, cache)

            await gateway.update_field(1, "status", "complete")
            await gateway.update_field(1, "status", "draft")

        assert sent == [{"status": "complete"}, {"status": "draft"}]
