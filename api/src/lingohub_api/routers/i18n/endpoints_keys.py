from typing import Any, Dict

from fastapi import Depends, Request

from lingohub_api.auth import WorkspaceContext, ensure_manager, get_workspace_context
from lingohub_api.errors import InvalidBody, json_errors_for
from lingohub_api.importer import I18nStore
from lingohub_api.routers.i18n import router
from lingohub_api.services.key_sync import normalize_incoming, sync_keys

json_errors_for(f"{router.prefix}/sync-keys", lambda message: {"ok": False, "error": message})


@router.post("/sync-keys")
async def sync_keys_endpoint(
    request: Request,
    ctx: WorkspaceContext = Depends(get_workspace_context),  # noqa: B008
) -> Dict[str, Any]:
    ensure_manager(ctx, "Only workspace owners and admins can sync keys")
    try:
        body = await request.json()
    except ValueError:
        raise InvalidBody("Invalid JSON body") from None

    keys = body.get("keys") if isinstance(body, dict) else None
    if not isinstance(keys, list):
        raise InvalidBody("Missing keys array")

    result = sync_keys(
        I18nStore(ctx.session),
        ctx.workspace_id,
        normalize_incoming(keys),
        overwrite_en=body.get("overwrite_en") is True,
    )
    return result.as_dict()
