import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from lingohub_api.auth import (
    ONE_YEAR_SECONDS,
    WORKSPACE_COOKIE,
    cookie_secure,
    get_current_user,
    validate_workspace_membership,
)
from lingohub_api.db import get_session
from lingohub_api.errors import InvalidBody, json_errors_for
from lingohub_models import User

router = APIRouter(prefix="/api/workspace", tags=["workspace"])
logger = logging.getLogger(__name__)

json_errors_for(f"{router.prefix}/set", lambda message: {"error": message})


@router.post("/set")
async def set_workspace(
    request: Request,
    user: User = Depends(get_current_user),  # noqa: B008
    session: Session = Depends(get_session),  # noqa: B008
) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        raise InvalidBody("Invalid JSON body") from None

    workspace_id = body.get("workspaceId") if isinstance(body, dict) else None
    if not workspace_id or not isinstance(workspace_id, str):
        raise InvalidBody("Invalid workspace ID")

    ws_uuid = validate_workspace_membership(session, workspace_id, user.id)

    logger.info("Workspace selected", extra={"workspace_id": str(ws_uuid), "user_id": str(user.id)})
    resp = JSONResponse({"success": True, "workspaceId": str(ws_uuid)})
    resp.set_cookie(
        WORKSPACE_COOKIE,
        str(ws_uuid),
        path="/",
        max_age=ONE_YEAR_SECONDS,
        httponly=True,
        samesite="lax",
        secure=cookie_secure(),
    )
    return resp
