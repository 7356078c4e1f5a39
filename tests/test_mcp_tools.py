from __future__ import annotations

import asyncio

from endpoints.mcp_endpoints import SettingsTools, build_mcp
from services.api import SettingsApi


def _tools(store, backup) -> SettingsTools:
    return SettingsTools(SettingsApi(store), store, backup)


def test_mcp_tools_basic_flow(store, backup):
    async def _run():
        tools = _tools(store, backup)

        r = await tools.replace_settings("Porch/Light", {"on": True, "schedule": ["18:00", "23:00"]})
        assert r["structuredContent"]["settings"] == {"on": True, "schedule": ["18:00", "23:00"]}

        r = await tools.import_settings("porch/light", {"schedule": ["19:00"]})
        assert r["structuredContent"]["settings"] == {"on": True, "schedule": ["19:00"]}

        r = await tools.get_settings("PORCH/LIGHT")
        assert "Settings for" in r["content"][0]["text"]
        assert r["structuredContent"]["settings"] == {"on": True, "schedule": ["19:00"]}

        r = await tools.list_settings_uris()
        assert r["structuredContent"]["uris"] == ["Porch/Light"]

        r = await tools.create_backup()
        assert r["structuredContent"]["backup"]["Settings"] == {"Porch/Light": {"on": True, "schedule": ["19:00"]}}

    asyncio.run(_run())


def test_mcp_tools_report_errors(store, backup):
    async def _run():
        tools = _tools(store, backup)
        r = await tools.replace_settings(None, {"a": 1})  # type: ignore[arg-type]
        assert r["structuredContent"]["error"] == "InvalidArgument"

    asyncio.run(_run())


def test_build_mcp_registers_tools(store, backup):
    mcp = build_mcp(_tools(store, backup))
    names = {tool.name for tool in asyncio.run(mcp.list_tools())}
    assert names == {"get_settings", "replace_settings", "import_settings", "list_settings_uris", "create_backup"}
