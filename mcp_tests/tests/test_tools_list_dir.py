import pytest

from core.errors import NotADirError, VolumeGoneError
from tools import list_dir as list_dir_tool


@pytest.mark.asyncio
async def test_list_dir_tool_returns_entry_records(dummy_mcp, service):
    await service.start()
    list_dir_tool.register(dummy_mcp, service=service)
    fn = dummy_mcp.tools["list_dir"]

    out = await fn(path="docs")

    assert [e["name"] for e in out] == ["notes", "readme.txt"]
    assert out[1]["full_path"] == "docs/readme.txt"
    assert out[1]["kind"] == "file"
    assert out[1]["size"] == 5
    assert out[0]["is_directory"] is True
    assert "size" not in out[0]


@pytest.mark.asyncio
async def test_list_dir_tool_defaults_to_root(dummy_mcp, service):
    await service.start()
    list_dir_tool.register(dummy_mcp, service=service)

    out = await dummy_mcp.tools["list_dir"]()

    assert [e["name"] for e in out] == ["docs", "empty", "top.txt"]


@pytest.mark.asyncio
async def test_list_dir_tool_propagates_errors(dummy_mcp, service):
    await service.start()
    list_dir_tool.register(dummy_mcp, service=service)
    fn = dummy_mcp.tools["list_dir"]

    with pytest.raises(NotADirError):
        await fn(path="top.txt")
    with pytest.raises(VolumeGoneError):
        await fn(path="", volume_id="usb9")
