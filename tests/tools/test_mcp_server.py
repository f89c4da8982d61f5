"""FastMCP server — tools/list and tools/call over an in-memory client.

Tests cover:
    - tools/list publishes the registry descriptors verbatim
    - tools/call success returns the dispatcher's text
    - tools/call failures come back with isError=true, never as a crash
    - Unknown tool names get the same "Error: " text as other failures
"""

import json

import pytest
from fastmcp import Client

from zip_mcp.tools.mcp_server import mcp
from zip_mcp.tools.registry import list_tools


@pytest.mark.asyncio
async def test_list_tools_matches_registry():
    async with Client(mcp) as client:
        tools = await client.list_tools()

    published = {tool.name: tool for tool in tools}
    assert set(published) == {"compress", "decompress", "getZipInfo", "echo"}
    for descriptor in list_tools():
        wire = descriptor.to_dict()
        assert published[descriptor.name].description == wire["description"]
        assert published[descriptor.name].inputSchema == wire["inputSchema"]


@pytest.mark.asyncio
async def test_call_echo():
    async with Client(mcp) as client:
        result = await client.call_tool_mcp("echo", {"message": "hi"})

    assert result.isError is False
    assert result.content[0].text == "Echo: hi"


@pytest.mark.asyncio
async def test_call_compress_and_inspect(tmp_path, sample_file):
    output = tmp_path / "out.zip"
    async with Client(mcp) as client:
        compressed = await client.call_tool_mcp(
            "compress", {"input": str(sample_file), "output": str(output)},
        )
        info = await client.call_tool_mcp("getZipInfo", {"input": str(output)})

    assert compressed.isError is False
    assert json.loads(compressed.content[0].text)["files"] == 1
    assert json.loads(info.content[0].text)["totalEntries"] == 1


@pytest.mark.asyncio
async def test_call_failure_is_reported_as_tool_error(tmp_path, sample_file):
    output = tmp_path / "out.zip"
    output.write_bytes(b"existing")
    async with Client(mcp) as client:
        result = await client.call_tool_mcp(
            "compress", {"input": str(sample_file), "output": str(output)},
        )

    assert result.isError is True
    assert "already exists" in result.content[0].text
    assert output.read_bytes() == b"existing"


@pytest.mark.asyncio
async def test_call_missing_required_argument(tmp_path):
    async with Client(mcp) as client:
        result = await client.call_tool_mcp("decompress", {"input": str(tmp_path / "a.zip")})

    assert result.isError is True
    assert "Missing required argument: output" in result.content[0].text


@pytest.mark.asyncio
async def test_unknown_tool_uses_error_envelope():
    async with Client(mcp) as client:
        result = await client.call_tool_mcp("nope", {})

    assert result.isError is True
    assert result.content[0].text == "Error: Unknown tool: nope"


@pytest.mark.asyncio
async def test_omitted_arguments_report_missing_field():
    # The MCP SDK hands an omitted arguments object to the server as {}.
    async with Client(mcp) as client:
        result = await client.call_tool_mcp("echo", None)

    assert result.isError is True
    assert result.content[0].text == "Error: Missing required argument: message"
