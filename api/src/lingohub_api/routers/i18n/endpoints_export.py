from fastapi import Depends, Response

from lingohub_api.auth import WorkspaceContext, get_workspace_context
from lingohub_api.importer import I18nStore
from lingohub_api.routers.i18n import logger, router
from lingohub_api.services.export import export_csv, export_filename


@router.get("/export.csv")
def export_translations(ctx: WorkspaceContext = Depends(get_workspace_context)) -> Response:  # noqa: B008
    content = export_csv(I18nStore(ctx.session), ctx.workspace_id)
    filename = export_filename(ctx.workspace_id)
    logger.info("CSV exported", extra={"workspace_id": str(ctx.workspace_id), "export_file": filename})
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
