"""Test log level filtering in the file sink."""

import pytest

from jjreconcile.core.log import (
    ConsoleSink,
    FileSink,
    OTLPSink,
    setup_logger,
)


@pytest.fixture(autouse=True)
def restore_logger(tmp_path):
    """Put the session console logger back after each test."""
    yield
    setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def file_logger(tmp_path):
    """Build a file-only logger at the requested level."""
    loggers = []

    def make(level):
        log_file = tmp_path / f"{level}.log"
        logger = setup_logger(
            log_root=tmp_path,
            run_name="test",
            console=ConsoleSink(enabled=False),
            otlp=OTLPSink(enabled=False),
            file=FileSink(enabled=True, level=level, path=str(log_file)),
        )
        loggers.append(logger)
        return logger, log_file

    yield make

    for logger in loggers:
        logger.close()


def test_spew_level_includes_all(file_logger):
    logger, log_file = file_logger("spew")

    logger.spew("SPEW message")
    logger.trace("TRACE message")
    logger.debug("DEBUG message")
    logger.info("INFO message")
    logger.close()

    content = log_file.read_text()
    assert "SPEW message" in content
    assert "TRACE message" in content
    assert "DEBUG message" in content
    assert "INFO message" in content


def test_info_level_filters_debug(file_logger):
    logger, log_file = file_logger("info")

    logger.debug("DEBUG message")
    logger.info("Executing: jj abandon -r 'abc'")
    logger.warning("WARN message")
    logger.close()

    content = log_file.read_text()
    assert "DEBUG message" not in content
    assert "Executing: jj abandon" in content
    assert "WARN message" in content


def test_default_file_path_uses_run_name(tmp_path):
    logger = setup_logger(
        log_root=tmp_path,
        run_name="nightly",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True),
    )
    logger.info("hello")
    logger.close()

    assert (tmp_path / "nightly" / "jjreconcile.log").is_file()


def test_close_releases_file(tmp_path):
    logger = setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(tmp_path / "test.log")),
    )
    assert not logger.file._file.closed

    with logger:
        logger.info("inside")

    assert logger.file._file.closed


def test_config_close_cascades_to_file(tmp_path):
    """Config.close() reaches the file sink through the Logger."""
    from jjreconcile.core.config import Config
    from jjreconcile.core.log import Logger

    config = Config(
        log_root=tmp_path,
        logger=Logger(
            console=ConsoleSink(enabled=False),
            file=FileSink(enabled=True, path=str(tmp_path / "cascade.log")),
        ),
    )
    assert not config.logger.file._file.closed

    config.close()

    assert config.logger.file._file.closed
