import structlog.testing

from core.logging_config import configure_logging, get_logger


def test_get_logger_carries_module_name():
    log = get_logger("hosts.mount_host")

    with structlog.testing.capture_logs() as logs:
        log.info("volume_attached", volume_id="usb0")

    assert logs == [
        {"event": "volume_attached", "volume_id": "usb0", "logger": "hosts.mount_host", "log_level": "info"}
    ]


def test_configure_logging_accepts_unknown_level():
    configure_logging(level="chatty", json_output=False)
    configure_logging(level="INFO", json_output=True)
