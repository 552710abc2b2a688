from __future__ import annotations

import base64

import anyio
from mcp import types
from mcp.shared.memory import create_connected_server_and_client_session

from design_compare.conf import Settings
from design_compare.server.server import create_server

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def _list_tools(settings: Settings) -> types.ListToolsResult:
    async def _go() -> types.ListToolsResult:
        async with create_connected_server_and_client_session(create_server(settings)) as client:
            return await client.list_tools()

    return anyio.run(_go)


def _call_tool(settings: Settings, name: str, arguments: dict) -> types.CallToolResult:
    async def _go() -> types.CallToolResult:
        async with create_connected_server_and_client_session(create_server(settings)) as client:
            return await client.call_tool(name, arguments)

    return anyio.run(_go)


class TestCompareDesignServer:
    def test_initialization_options(self, settings):
        options = create_server(settings).create_initialization_options()
        assert options.server_name == "mcp-design-comparison"
        assert options.server_version == settings.server_version
        assert options.capabilities.tools is not None

    def test_initialize_handshake(self, settings):
        async def _go() -> types.InitializeResult:
            async with create_connected_server_and_client_session(
                create_server(settings)
            ) as client:
                return await client.initialize()

        result = anyio.run(_go)
        assert result.serverInfo.name == "mcp-design-comparison"
        assert result.serverInfo.version == settings.server_version
        assert result.capabilities.tools is not None

    def test_tools_list(self, settings):
        tools = _list_tools(settings).tools
        assert [tool.name for tool in tools] == ["compare_design"]
        schema = tools[0].inputSchema
        assert schema["required"] == ["design_path", "implementation_path"]
        assert schema["properties"]["threshold"]["default"] == 0.1

    def test_tools_call(self, settings, write_image):
        design = write_image("design.png", color=RED)
        implementation = write_image("implementation.png", color=BLUE)

        result = _call_tool(
            settings,
            "compare_design",
            {"design_path": design, "implementation_path": implementation},
        )

        assert not result.isError
        text, image = result.content
        assert text.type == "text"
        assert "Different Pixels: 100" in text.text
        assert image.type == "image"
        assert image.mimeType == "image/png"
        assert base64.b64decode(image.data).startswith(b"\x89PNG")

    def test_comparison_failure_is_tool_error(self, settings, write_image):
        design = write_image("design.png", 10, 10, RED)
        implementation = write_image("implementation.png", 20, 20, BLUE)

        result = _call_tool(
            settings,
            "compare_design",
            {"design_path": design, "implementation_path": implementation},
        )

        assert result.isError
        assert result.content[0].text == (
            "Error comparing screenshots: Image dimensions don't match: "
            "design (10x10) vs implementation (20x20)"
        )

    def test_missing_arguments_is_tool_error(self, settings):
        result = _call_tool(settings, "compare_design", {"design_path": "a.png"})
        assert result.isError
        assert "implementation_path" in result.content[0].text

    def test_unknown_tool(self, settings):
        result = _call_tool(settings, "resize_image", {})
        assert result.isError
        assert "resize_image" in result.content[0].text
