from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from lingohub_api.auth import (
    DEFAULT_LOCALE,
    LOCALE_COOKIE,
    ONE_YEAR_SECONDS,
    WorkspaceContext,
    cookie_secure,
    get_workspace_context,
)
from lingohub_api.errors import InvalidBody, json_errors_for
from lingohub_api.importer import I18nStore
from lingohub_api.routers.i18n import logger, router
from lingohub_api.services.messages import load_messages

NO_STORE = {"Cache-Control": "no-store, must-revalidate"}

json_errors_for(
    f"{router.prefix}/messages.json",
    lambda message: {"error": message, "messages": {}, "locale": DEFAULT_LOCALE},
    headers=NO_STORE,
)
json_errors_for(f"{router.prefix}/locale", lambda message: {"ok": False, "error": message})


@router.get("/messages.json")
def get_messages(ctx: WorkspaceContext = Depends(get_workspace_context)) -> JSONResponse:  # noqa: B008
    # The ``t`` query parameter is a client cache-buster and is ignored
    messages = load_messages(I18nStore(ctx.session), ctx.workspace_id, ctx.locale)
    logger.info(
        "Messages served",
        extra={"workspace_id": str(ctx.workspace_id), "locale": ctx.locale, "count": len(messages)},
    )
    return JSONResponse({"messages": messages, "locale": ctx.locale}, headers=NO_STORE)


@router.post("/locale")
async def set_locale(
    request: Request,
    ctx: WorkspaceContext = Depends(get_workspace_context),  # noqa: B008
) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        raise InvalidBody("Invalid JSON body") from None

    locale = body.get("locale") if isinstance(body, dict) else None
    if not isinstance(locale, str) or not locale:
        raise InvalidBody("Missing locale")
    normalized = locale.strip()
    if not normalized:
        raise InvalidBody("Invalid locale")

    if I18nStore(ctx.session).find_language(ctx.workspace_id, normalized) is None:
        raise InvalidBody("Locale not found for this workspace. Add it in Settings → i18n → Languages.")

    resp = JSONResponse({"ok": True, "locale": normalized})
    resp.set_cookie(
        LOCALE_COOKIE,
        normalized,
        path="/",
        max_age=ONE_YEAR_SECONDS,
        httponly=True,
        samesite="lax",
        secure=cookie_secure(),
    )
    return resp
