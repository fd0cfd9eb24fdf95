import logging

from dummy_http_fixture.logging_config import UVICORN_LOGGERS, setup_logging


def test_setup_logging_aligns_uvicorn_levels():
    root = logging.getLogger()
    previous = root.level
    try:
        setup_logging("debug", uvicorn_level="error")
        assert root.level == logging.DEBUG
        for name in UVICORN_LOGGERS:
            assert logging.getLogger(name).level == logging.ERROR

        setup_logging("warning")
        for name in UVICORN_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
    finally:
        root.setLevel(previous)
