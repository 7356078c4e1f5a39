from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from dotenv import load_dotenv

from config import AppConfig, configure_logging, get_config
from endpoints.mcp_endpoints import SettingsTools, build_mcp
from endpoints.settings_endpoints import build_router
from persistence import DiskStorageService, InMemoryStorageService, StorageService
from services.api import SettingsApi
from services.backup_service import BackupService
from services.settings_service import SettingsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingsHub:
    config: AppConfig
    storage: StorageService
    backup: BackupService
    settings: SettingsService
    api: SettingsApi


def build_hub(config: AppConfig) -> SettingsHub:
    storage: StorageService
    if config.persist_to_disk:
        storage = DiskStorageService(config.data_dir)
        logger.info("Persisting settings to %s", config.data_dir / config.storage_name)
    else:
        storage = InMemoryStorageService()
        logger.info("PERSIST_TO_DISK is off; settings live in memory only")

    backup = BackupService()
    settings = SettingsService(
        storage,
        backup,
        storage_name=config.storage_name,
        backup_section=config.backup_section,
    )
    settings.initialize()

    api = SettingsApi(settings, log_requests=config.debug_log_requests)
    return SettingsHub(config=config, storage=storage, backup=backup, settings=settings, api=api)


def create_app(config: AppConfig | None = None) -> FastAPI:
    load_dotenv("local.env")

    if config is None:
        config = get_config()
    configure_logging(config)

    hub = build_hub(config)
    mcp = build_mcp(SettingsTools(hub.api, hub.settings, hub.backup))
    mcp.settings.streamable_http_path = "/"

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        async with mcp.session_manager.run():
            yield

    app = FastAPI(lifespan=lifespan)
    app.state.hub = hub

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/mcp")
    async def mcp_redirect_post():
        return RedirectResponse(url="/mcp/", status_code=307)

    @app.get("/mcp")
    async def mcp_redirect_get():
        return RedirectResponse(url="/mcp/", status_code=307)

    @app.get("/health")
    async def health():
        return {"status": "ok", "documents": len(hub.settings.uris())}

    app.include_router(build_router(hub.api, hub.backup))

    app.mount("/mcp", mcp.streamable_http_app())

    return app


app = create_app()
