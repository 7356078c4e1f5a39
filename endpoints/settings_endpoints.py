from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException

from services.api import SettingsApi
from services.backup_service import BackupService
from services.errors import (
    ApiActionNotFound,
    ConversionError,
    InvalidArgument,
    SettingsError,
    UnsupportedRequestShape,
)

logger = logging.getLogger(__name__)


def _to_http_error(e: SettingsError) -> HTTPException:
    if isinstance(e, ApiActionNotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (InvalidArgument, UnsupportedRequestShape)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ConversionError):
        return HTTPException(status_code=422, detail=str(e))
    logger.warning("SETTINGS HTTP: unmapped error %r", e)
    return HTTPException(status_code=500, detail=str(e))


def build_router(api: SettingsApi, backup: BackupService) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["settings"])

    @router.get("/settings")
    async def list_actions() -> dict[str, Any]:
        return {"actions": api.actions}

    @router.post("/settings/{action}")
    async def invoke_action(action: str, payload: Any = Body(default=None)) -> Any:
        try:
            response = await asyncio.to_thread(api.invoke, action, payload)
        except SettingsError as e:
            raise _to_http_error(e) from e
        return response if response is not None else {"ok": True}

    @router.post("/backup/create")
    async def create_backup() -> dict[str, Any]:
        return await asyncio.to_thread(backup.create_backup)

    @router.post("/backup/restore")
    async def restore_backup(envelope: Any = Body(default=None)) -> dict[str, Any]:
        try:
            await asyncio.to_thread(backup.restore_backup, envelope)
        except SettingsError as e:
            raise _to_http_error(e) from e
        return {"ok": True}

    return router
