import logging

import log_setup


def test_resolve_level():
    assert log_setup.resolve_level("debug") == logging.DEBUG
    assert log_setup.resolve_level(logging.ERROR) == logging.ERROR
    assert log_setup.resolve_level("chatty") == logging.WARNING


def test_configure_logging_writes_to_file_and_is_idempotent(tmp_path):
    root = logging.getLogger()
    old_level = root.level
    path = tmp_path / "logs" / "h5pivot.log"
    try:
        log_setup.configure_logging("INFO", str(path))
        handler = log_setup.configure_logging("INFO", str(path))
        ours = [h for h in root.handlers if isinstance(h, log_setup.ViewerLogHandler)]
        assert ours == [handler]
        assert root.level == logging.INFO

        logging.getLogger("catalog_scanner").info("indexed %d", 3)
        handler.flush()
        text = path.read_text()
        assert "INFO" in text
        assert "catalog_scanner: indexed 3" in text
    finally:
        for h in list(root.handlers):
            if isinstance(h, log_setup.ViewerLogHandler):
                root.removeHandler(h)
                h.close()
        root.setLevel(old_level)
        logging.captureWarnings(False)
