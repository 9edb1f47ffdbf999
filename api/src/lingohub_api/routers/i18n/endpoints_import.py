from typing import Any, Dict, Optional

from fastapi import Depends, File, Form, UploadFile

from lingohub_api.auth import WorkspaceContext, ensure_manager, get_workspace_context
from lingohub_api.errors import MissingFile
from lingohub_api.importer import (
    I18nStore,
    decode_upload,
    parse_explicit_mapping,
    parse_policy,
    run_import,
)
from lingohub_api.routers.i18n import logger, router


@router.post("/import")
def import_translations(
    ctx: WorkspaceContext = Depends(get_workspace_context),  # noqa: B008
    file: Optional[UploadFile] = File(None),  # noqa: B008
    policy: Optional[str] = Form(None),  # noqa: B008
    preview: Optional[str] = Form(None),  # noqa: B008
    column_mapping: Optional[str] = Form(None, alias="columnMapping"),  # noqa: B008
) -> Dict[str, Any]:
    """Import a translation CSV into the current workspace.

    ``preview=true`` returns the computed plan without writing anything.
    Without ``columnMapping`` the file must use the legacy fixed header.
    """
    ensure_manager(ctx, "Only workspace owners and admins can import translations")

    if file is None:
        raise MissingFile("No file provided")
    conflict_policy = parse_policy(policy)
    is_preview = preview == "true"
    mapping = parse_explicit_mapping(column_mapping) if column_mapping else None

    text = decode_upload(file.file.read())
    logger.info(
        "CSV import started",
        extra={
            "workspace_id": str(ctx.workspace_id),
            "user_id": str(ctx.user.id),
            "upload_name": file.filename,
            "policy": conflict_policy.value,
            "preview": is_preview,
            "mapping": "explicit" if mapping else "legacy",
        },
    )
    result = run_import(
        I18nStore(ctx.session),
        ctx.workspace_id,
        text,
        conflict_policy,
        mapping=mapping,
        preview=is_preview,
    )
    return result.as_dict()
