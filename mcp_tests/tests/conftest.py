import pytest

from hosts.memory_host import MemoryHost
from service.facade import UsbFileService


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator


SAMPLE_TREE = {
    "docs": {
        "readme.txt": b"hello",
        "notes": {"todo.md": b"- buy milk\n"},
    },
    "empty": {},
    "top.txt": "top level",
}


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def memory_host():
    host = MemoryHost()
    host.attach("usb0", SAMPLE_TREE, label="KINGSTON")
    return host


@pytest.fixture
def service(memory_host):
    # Not started: tests await service.start() inside their own event loop
    return UsbFileService(memory_host, chunk_size=4)
