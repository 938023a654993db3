from prdstudio.api.http.health import router as health_router
from prdstudio.api.http.projects import router as projects_router
from prdstudio.api.http.documents import router as documents_router

__all__ = [
    "health_router",
    "projects_router",
    "documents_router"
]
