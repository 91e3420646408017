import logging

from fastapi import APIRouter

from proxy_tab.dispatch.route import router as dispatch_router
from proxy_tab.vars import BASE_PATH

router = APIRouter()

logger = logging.getLogger("uvicorn.error")

if BASE_PATH:
    logger.info(f"Using BASE_PATH: {BASE_PATH}")
else:
    logger.info("No BASE_PATH set, using root path")

router.include_router(dispatch_router)
