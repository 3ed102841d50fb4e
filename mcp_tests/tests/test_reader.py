import pytest

from core.errors import NotAFileError, TooLargeError, ValidationError, VolumeGoneError, VolumeIOError
from core.models import Entry, EntryKind
from hosts.memory_host import MemoryHost
from service.reader import FileReader, decode_text
from service.watcher import VolumeWatcher


def _file(name, size):
    return Entry(path=(name,), kind=EntryKind.FILE, size=size)


async def _volume(host):
    watcher = VolumeWatcher(host)
    await watcher.start()
    return watcher.first()


class RecordingHost(MemoryHost):
    def __init__(self):
        super().__init__()
        self.reads = []

    async def read_file(self, volume_id, segments, offset, length):
        self.reads.append((offset, length))
        return await super().read_file(volume_id, segments, offset, length)


@pytest.mark.asyncio
async def test_reads_in_bounded_chunks():
    host = RecordingHost()
    host.attach("usb0", {"a.txt": b"0123456789"})
    volume = await _volume(host)

    reader = FileReader(host, chunk_size=4)
    text = await reader.read_text(volume, _file("a.txt", 10))

    assert text == "0123456789"
    assert host.reads == [(0, 4), (4, 4), (8, 4)]


@pytest.mark.asyncio
async def test_exact_multiple_of_chunk_size():
    host = RecordingHost()
    host.attach("usb0", {"a.txt": b"01234567"})
    volume = await _volume(host)

    text = await FileReader(host, chunk_size=4).read_text(volume, _file("a.txt", 8))

    assert text == "01234567"
    assert host.reads == [(0, 4), (4, 4), (8, 4)]


@pytest.mark.asyncio
async def test_empty_file():
    host = MemoryHost()
    host.attach("usb0", {"empty.txt": b""})
    volume = await _volume(host)

    assert await FileReader(host).read_text(volume, _file("empty.txt", 0)) == ""


@pytest.mark.asyncio
async def test_directory_is_not_a_file():
    host = MemoryHost()
    host.attach("usb0", {"d": {}})
    volume = await _volume(host)

    with pytest.raises(NotAFileError):
        await FileReader(host).read_text(volume, Entry(path=("d",), kind=EntryKind.DIRECTORY))


@pytest.mark.asyncio
async def test_too_large_rejected_before_reading():
    host = RecordingHost()
    host.attach("usb0", {"big.bin": b"x" * 20})
    volume = await _volume(host)

    with pytest.raises(TooLargeError):
        await FileReader(host, max_bytes=10).read_text(volume, _file("big.bin", 20))
    assert host.reads == []


@pytest.mark.asyncio
async def test_file_growing_past_limit_is_too_large():
    host = MemoryHost()
    host.attach("usb0", {"grow.log": b"x" * 20})
    volume = await _volume(host)

    # Entry snapshot claims a small size; the bytes on the volume say otherwise
    with pytest.raises(TooLargeError):
        await FileReader(host, max_bytes=10, chunk_size=4).read_text(volume, _file("grow.log", 2))


class DetachMidReadHost(MemoryHost):
    async def read_file(self, volume_id, segments, offset, length):
        data = await super().read_file(volume_id, segments, offset, length)
        if offset > 0:
            self.detach(volume_id)
        return data


@pytest.mark.asyncio
async def test_detach_mid_read_is_volume_gone_not_partial_text():
    host = DetachMidReadHost()
    host.attach("usb0", {"a.txt": b"0123456789"})
    volume = await _volume(host)

    with pytest.raises(VolumeGoneError):
        await FileReader(host, chunk_size=4).read_text(volume, _file("a.txt", 10))


class BrokenHost(MemoryHost):
    async def read_file(self, volume_id, segments, offset, length):
        raise OSError(5, "Input/output error")


@pytest.mark.asyncio
async def test_host_os_error_is_volume_io_error():
    host = BrokenHost()
    host.attach("usb0", {"a.txt": b"x"})
    volume = await _volume(host)

    with pytest.raises(VolumeIOError):
        await FileReader(host).read_text(volume, _file("a.txt", 1))


def test_decode_utf8_and_bom():
    assert decode_text("héllo".encode("utf-8")) == "héllo"
    assert decode_text(b"\xef\xbb\xbfhello") == "hello"


def test_decode_invalid_bytes_replaced_deterministically():
    data = b"ok \xff\xfe end"
    first = decode_text(data)
    assert first == "ok \ufffd\ufffd end"
    assert decode_text(data) == first


def test_decode_fallback_encoding():
    assert decode_text("café".encode("cp1252"), fallback_encoding="cp1252") == "café"


def test_decode_caller_encoding_is_strict():
    assert decode_text("żółw".encode("utf-16"), encoding="utf-16") == "żółw"
    with pytest.raises(VolumeIOError):
        decode_text(b"\xff\xfe\x00", encoding="ascii")
    with pytest.raises(VolumeIOError):
        decode_text(b"abc", encoding="no-such-codec")


def test_reader_validates_configuration():
    host = MemoryHost()
    with pytest.raises(ValidationError):
        FileReader(host, chunk_size=0)
    with pytest.raises(ValidationError):
        FileReader(host, max_bytes=0)
    with pytest.raises(ValidationError):
        FileReader(host, fallback_encoding="no-such-codec")


def test_decode_replacement_path_strips_bom():
    assert decode_text(b"\xef\xbb\xbfok \xff") == "ok �"
