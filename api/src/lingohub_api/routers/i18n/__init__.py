import logging
from fastapi import APIRouter


router = APIRouter(prefix="/api/i18n", tags=["i18n"])
logger = logging.getLogger(__name__)


# Import submodules to register routes on the shared router
from . import endpoints_import  # noqa: F401,E402
from . import endpoints_export  # noqa: F401,E402
from . import endpoints_keys  # noqa: F401,E402
from . import endpoints_messages  # noqa: F401,E402

__all__ = ["router"]
