"""
URL configuration for the Task Manager API.
"""
import logging

from django.contrib import admin
from django.urls import path
from django.conf import settings
from django.conf.urls.static import static
from django.http import Http404
from ninja import NinjaAPI
from ninja.errors import HttpError, ValidationError

from apps.core.exceptions import ServiceError

logger = logging.getLogger(__name__)

api = NinjaAPI(
    title="Task Manager API",
    version="1.0.0",
    description="Multi-tenant task management: tasks, checklists, comments and dashboards",
    docs_url="/docs",
)

from apps.identity.api import router as auth_router, users_router
from apps.tasks.api import router as tasks_router
from apps.comments.api import router as comments_router
from apps.dashboard.api import router as dashboard_router

api.add_router("/auth", auth_router)
api.add_router("/users", users_router)
api.add_router("/tasks", tasks_router)
api.add_router("/tasks", comments_router)
api.add_router("/dashboard", dashboard_router)


# =============================================================================
# Error Handlers
# =============================================================================
# Every error body is {"message": ..., "error"?: ...}

@api.exception_handler(ServiceError)
def service_error(request, exc: ServiceError):
    return api.create_response(request, {"message": exc.message}, status=exc.status_code)


@api.exception_handler(ValidationError)
def validation_error(request, exc: ValidationError):
    return api.create_response(
        request,
        {"message": "Invalid request", "error": exc.errors},
        status=400,
    )


@api.exception_handler(HttpError)
def http_error(request, exc: HttpError):
    return api.create_response(request, {"message": str(exc)}, status=exc.status_code)


@api.exception_handler(Http404)
def not_found(request, exc):
    return api.create_response(request, {"message": "Not found"}, status=404)


@api.exception_handler(Exception)
def server_error(request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.path}")
    return api.create_response(
        request,
        {"message": "Server error", "error": str(exc)},
        status=500,
    )


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
]

# Serve uploaded files in development
if settings.DEBUG:
    urlpatterns += static(
        getattr(settings, 'MEDIA_URL', '/uploads/'),
        document_root=getattr(settings, 'MEDIA_ROOT', settings.BASE_DIR / 'uploads')
    )
