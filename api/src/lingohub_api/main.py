import logging
import os
import time
import traceback
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from sqladmin import Admin, ModelView
from starlette.middleware.base import BaseHTTPMiddleware

from lingohub_api.db import engine
from lingohub_api.errors import LingoHubError, lingohub_error_handler
from lingohub_api.logging_config import configure_logging
from lingohub_api.routers.i18n import router as i18n_router
from lingohub_api.routers.workspace import router as workspace_router
from lingohub_models import I18nKey, I18nLanguage, I18nTranslation, Workspace, WorkspaceMember

configure_logging(
    service_name=os.getenv("LOG_SERVICE_NAME", "api"),
)

app = FastAPI(title="LingoHub API")
app.add_exception_handler(LingoHubError, lingohub_error_handler)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        start = time.perf_counter()
        try:
            response = await call_next(request)
            # Log 5xx responses too (even if handled downstream)
            if 500 <= response.status_code < 600:
                duration_ms = int((time.perf_counter() - start) * 1000)
                logging.getLogger(__name__).error(
                    "HTTP 5xx response",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "client": request.client.host if request.client else None,
                        "duration_ms": duration_ms,
                    },
                )
            return response
        except Exception as exc:  # noqa: BLE001 - we want to log all unhandled exceptions
            duration_ms = int((time.perf_counter() - start) * 1000)
            logging.getLogger(__name__).error(
                "Unhandled exception during request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "client": request.client.host if request.client else None,
                    "duration_ms": duration_ms,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": traceback.format_exc(),
                },
            )
            raise


app.add_middleware(ErrorLoggingMiddleware)


@app.get("/health")
def healthcheck() -> dict:
    return {"status": "ok"}


app.include_router(i18n_router)
app.include_router(workspace_router)


# --- SQLAdmin: gated by ADMIN_ENABLED and protected by a static Bearer token ---
def _admin_token_error(authorization: Optional[str]) -> Optional[PlainTextResponse]:
    required = os.getenv("ADMIN_TOKEN")
    if not required:
        return PlainTextResponse("Admin is not configured", status_code=status.HTTP_403_FORBIDDEN)
    if not authorization or not authorization.startswith("Bearer "):
        return PlainTextResponse("Missing Bearer token", status_code=status.HTTP_401_UNAUTHORIZED)
    if authorization.split(" ", 1)[1] != required:
        return PlainTextResponse("Invalid token", status_code=status.HTTP_401_UNAUTHORIZED)
    return None


class ReadOnlyModelView(ModelView):
    can_create = False
    can_edit = False
    can_delete = False


def admin_enabled() -> bool:
    return os.getenv("ADMIN_ENABLED", "false").lower() in {"1", "true", "yes"}


if admin_enabled() and engine is not None:
    admin = Admin(app=app, engine=engine)

    class WorkspaceAdmin(ReadOnlyModelView, model=Workspace):
        name = "Workspaces"
        column_list = [Workspace.id, Workspace.name, Workspace.owner_id, Workspace.created_at]

    class WorkspaceMemberAdmin(ReadOnlyModelView, model=WorkspaceMember):
        name = "Workspace Members"
        column_list = [WorkspaceMember.workspace_id, WorkspaceMember.user_id, WorkspaceMember.role]

    class LanguageAdmin(ReadOnlyModelView, model=I18nLanguage):
        name = "Languages"
        column_list = [I18nLanguage.workspace_id, I18nLanguage.code, I18nLanguage.name, I18nLanguage.is_rtl]
        column_default_sort = [(I18nLanguage.code, False)]

    class KeyAdmin(ReadOnlyModelView, model=I18nKey):
        name = "Keys"
        column_list = [I18nKey.workspace_id, I18nKey.key, I18nKey.module, I18nKey.type, I18nKey.screen, I18nKey.max_chars]
        column_default_sort = [(I18nKey.module, False), (I18nKey.key, False)]
        column_searchable_list = [I18nKey.key, I18nKey.module, I18nKey.screen]

    class TranslationAdmin(ReadOnlyModelView, model=I18nTranslation):
        name = "Translations"
        column_list = [
            I18nTranslation.key_id,
            I18nTranslation.language_id,
            I18nTranslation.value,
            I18nTranslation.status,
            I18nTranslation.updated_at,
        ]
        column_default_sort = [(I18nTranslation.updated_at, True)]
        column_searchable_list = [I18nTranslation.value]

    @app.middleware("http")
    async def admin_auth_middleware(request: Request, call_next):  # type: ignore[override]
        if request.url.path.startswith("/admin"):
            denied = _admin_token_error(request.headers.get("Authorization"))
            if denied is not None:
                return denied
        return await call_next(request)

    admin.add_view(WorkspaceAdmin)
    admin.add_view(WorkspaceMemberAdmin)
    admin.add_view(LanguageAdmin)
    admin.add_view(KeyAdmin)
    admin.add_view(TranslationAdmin)
