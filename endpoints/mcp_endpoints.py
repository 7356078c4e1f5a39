from __future__ import annotations

import asyncio
import logging
from typing import Any, Literal

from typing_extensions import TypedDict

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from services.api import SettingsApi
from services.backup_service import BackupService
from services.errors import SettingsError
from services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class ToolTextContent(TypedDict):
    type: Literal["text"]
    text: str


class SettingsToolResponse(TypedDict, total=False):
    content: list[ToolTextContent]
    structuredContent: dict[str, Any]


def _reply(message: str | None = None, **structured: Any) -> SettingsToolResponse:
    return {
        "content": ([{"type": "text", "text": message}] if message else []),
        "structuredContent": structured,
    }


def _error(e: SettingsError) -> SettingsToolResponse:
    return _reply(f"{type(e).__name__}: {e}", error=type(e).__name__)


class SettingsTools:
    """
    The MCP tool bodies, kept separate from FastMCP registration so they can be
    awaited directly.
    """

    def __init__(self, api: SettingsApi, settings: SettingsService, backup: BackupService):
        self._api = api
        self._settings = settings
        self._backup = backup

    async def get_settings(self, uri: str) -> SettingsToolResponse:
        try:
            document = await asyncio.to_thread(self._api.invoke, "get_settings", {"uri": uri})
        except SettingsError as e:
            return _error(e)
        return _reply(f"Settings for {uri}:", uri=uri, settings=document)

    async def replace_settings(self, uri: str, settings: dict[str, Any]) -> SettingsToolResponse:
        try:
            await asyncio.to_thread(self._api.invoke, "replace", {"uri": uri, "settings": settings})
            document = await asyncio.to_thread(self._settings.get_raw, uri)
        except SettingsError as e:
            return _error(e)
        return _reply(f"Replaced settings for {uri}.", uri=uri, settings=document)

    async def import_settings(self, uri: str, settings: dict[str, Any]) -> SettingsToolResponse:
        try:
            await asyncio.to_thread(self._api.invoke, "import", {"uri": uri, "settings": settings})
            document = await asyncio.to_thread(self._settings.get_raw, uri)
        except SettingsError as e:
            return _error(e)
        return _reply(f"Merged settings into {uri}.", uri=uri, settings=document)

    async def list_settings_uris(self) -> SettingsToolResponse:
        uris = sorted(await asyncio.to_thread(self._settings.uris), key=str.casefold)
        return _reply(f"{len(uris)} settings document(s).", uris=uris)

    async def create_backup(self) -> SettingsToolResponse:
        envelope = await asyncio.to_thread(self._backup.create_backup)
        return _reply(f"Backup created at {envelope['created_at']}.", backup=envelope)


def build_mcp(tools: SettingsTools) -> FastMCP:
    mcp = FastMCP(
        "Settings Hub",
        stateless_http=True,
        json_response=True,
        # FastMCP auto-enables DNS rebinding protection on localhost, which rejects proxied Host headers (421).
        transport_security=TransportSecuritySettings(enable_dns_rebinding_protection=False),
    )

    @mcp.tool()
    async def get_settings(uri: str) -> SettingsToolResponse:
        """
        Returns the raw settings document stored under a uri (empty if none).
        """
        return await tools.get_settings(uri)

    @mcp.tool()
    async def replace_settings(uri: str, settings: dict[str, Any]) -> SettingsToolResponse:
        """
        Replaces the settings document stored under a uri.
        """
        return await tools.replace_settings(uri, settings)

    @mcp.tool()
    async def import_settings(uri: str, settings: dict[str, Any]) -> SettingsToolResponse:
        """
        Merges a partial settings document into a uri (arrays are replaced, not merged).
        """
        return await tools.import_settings(uri, settings)

    @mcp.tool()
    async def list_settings_uris() -> SettingsToolResponse:
        """
        Lists every uri that currently holds a settings document.
        """
        return await tools.list_settings_uris()

    @mcp.tool()
    async def create_backup() -> SettingsToolResponse:
        """
        Creates a backup envelope containing all settings.
        """
        return await tools.create_backup()

    logger.debug("MCP: registered settings tools")
    return mcp
