import pytest

from core.errors import NotFoundError, ValidationError
from tools import exists as exists_tool
from tools import read_as_text as read_as_text_tool


class FakeService:
    def __init__(self, out):
        self._out = out
        self.calls = []

    async def read_as_text(self, path, volume=None, *, encoding=None):
        self.calls.append((path, volume, encoding))
        return self._out


@pytest.mark.asyncio
async def test_read_as_text_tool_validates_missing_path(dummy_mcp):
    read_as_text_tool.register(dummy_mcp, service=FakeService("x"))
    fn = dummy_mcp.tools["read_as_text"]

    with pytest.raises(ValidationError):
        await fn(path="   ")


@pytest.mark.asyncio
async def test_read_as_text_tool_delegates(dummy_mcp):
    fake = FakeService("content")
    read_as_text_tool.register(dummy_mcp, service=fake)
    fn = dummy_mcp.tools["read_as_text"]

    out = await fn(path="a.txt", volume_id="usb1", encoding="latin-1")

    assert out == "content"
    assert fake.calls == [("a.txt", "usb1", "latin-1")]


@pytest.mark.asyncio
async def test_read_as_text_tool_against_service(dummy_mcp, service):
    await service.start()
    read_as_text_tool.register(dummy_mcp, service=service)
    fn = dummy_mcp.tools["read_as_text"]

    assert await fn(path="/docs/readme.txt") == "hello"
    with pytest.raises(NotFoundError):
        await fn(path="missing.txt")


@pytest.mark.asyncio
async def test_exists_tool(dummy_mcp, service):
    await service.start()
    exists_tool.register(dummy_mcp, service=service)
    fn = dummy_mcp.tools["exists"]

    assert await fn(path="docs/notes/todo.md") is True
    assert await fn(path="docs/notes/done.md") is False
    with pytest.raises(ValidationError):
        await fn(path="")
