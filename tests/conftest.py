"""
Shared pytest fixtures.

Provides:
    - engine / session_factory: in-memory SQLite per test
    - project: default project (id=1)
    - api: httpx client bound to the FastAPI app over ASGI
    - requests_log: every request the api client sent
    - make_document: creates a document through the API
    - make_row: builds a table row without the backend
"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import prdstudio.db.models  # noqa: F401
from prdstudio.core.db import Base, get_db
from prdstudio.db.repositories.project_repository import ProjectRepository
from prdstudio.domains.documents.schemas import DocumentResponse
from prdstudio.domains.projects.entities import Project
from prdstudio.domains.table.cache import DocumentRow
from prdstudio.main import app

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def project(session_factory):
    async with session_factory() as session:
        return await ProjectRepository(session).create(
            Project(id=None, name="Mobile App Redesign", description="Demo")
        )


@pytest.fixture
def requests_log():
    return []


@pytest_asyncio.fixture
async def api(session_factory, project, requests_log):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    async def record(request):
        requests_log.append(request)

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://testserver",
        event_hooks={"request": [record]},
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_document(api, project, requests_log):
    """Create a document through POST and clear the request log."""
    async def factory(title="Untitled", **fields):
        payload = {"title": title, "projectId": project.id, **fields}
        response = await api.post("/api/documents", json=payload)
        assert response.status_code == 201, response.text
        requests_log.clear()
        return response.json()

    return factory


@pytest.fixture
def make_row():
    counter = {"id": 0}

    def factory(title="Doc", **fields):
        counter["id"] += 1
        doc_id = fields.pop("id", counter["id"])
        data = {
            "id": doc_id,
            "title": title,
            "project_id": 1,
            "status": "draft",
            "priority": "medium",
            "created_at": BASE_TIME + timedelta(days=doc_id),
            "updated_at": BASE_TIME + timedelta(days=doc_id),
        }
        data.update(fields)
        return DocumentRow.from_document(DocumentResponse(**data))

    return factory


@pytest.fixture
def sent_patches(requests_log):
    """PATCH requests sent by the api client."""
    def collect():
        return [r for r in requests_log if r.method == "PATCH"]

    return collect
