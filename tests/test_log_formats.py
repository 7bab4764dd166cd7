"""Test file sink output formats."""

import re

import pytest
import yaml

from jjreconcile.core.log import (
    ConsoleSink,
    FileSink,
    OTLPSink,
    setup_logger,
)
from jjreconcile.core.yaml_settings import DEFAULTS_FILE


@pytest.fixture
def file_logger(tmp_path):
    """Build a file-only logger with the given sink options."""

    def make(**sink_options):
        log_file = tmp_path / "jjreconcile.log"
        logger = setup_logger(
            log_root=tmp_path,
            run_name="test",
            console=ConsoleSink(enabled=False),
            otlp=OTLPSink(enabled=False),
            file=FileSink(enabled=True, path=str(log_file), **sink_options),
        )
        return logger, log_file

    yield make

    setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


def test_default_json_format(file_logger):
    """No template writes OpenTelemetry span JSON."""
    logger, log_file = file_logger()

    logger.info("Working with change")
    logger.close()

    content = log_file.read_text()
    assert content.startswith("{")
    assert '"name": "Working with change"' in content


def test_packaged_text_format(file_logger):
    """The template shipped in the package defaults."""
    defaults = yaml.safe_load(DEFAULTS_FILE.read_text())
    template = defaults["config"]["logger"]["file"]["format_template"]
    logger, log_file = file_logger(format_template=template)

    logger.info("Executing: jj abandon -r 'aaa111'")
    logger.close()

    line = log_file.read_text().strip()
    pattern = (
        r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d+ "
        r"\[info\] .+\.py:\d+ Executing: jj abandon -r 'aaa111'$"
    )
    assert re.match(pattern, line), f"Unexpected line: {line}"


def test_keyword_attributes_trail_message(file_logger):
    logger, log_file = file_logger(format_template="{message}")

    logger.info("Working with change", change_id="kxyz")
    logger.close()

    line = log_file.read_text().strip()
    assert line.startswith("Working with change │ ")
    assert "change_id='kxyz'" in line


def test_syslog_format(file_logger):
    logger, log_file = file_logger(
        format_template=(
            "<{priority}>1 {timestamp:%Y-%m-%dT%H:%M:%S%z} - "
            "jjreconcile - - - {message}"
        )
    )

    logger.warning("Divergent pair has issues")
    logger.close()

    line = log_file.read_text().strip()
    assert re.match(
        r"^<12>1 \d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{4} "
        r"- jjreconcile - - - Divergent pair has issues$",
        line,
    ), f"Unexpected line: {line}"


@pytest.mark.parametrize(
    "escape,expected",
    [
        (True, "Rebased 2 commits\\nWorking copy now at: kxyz\n"),
        (False, "Rebased 2 commits\nWorking copy now at: kxyz\n"),
    ],
)
def test_escape_special_characters(file_logger, escape, expected):
    logger, log_file = file_logger(
        format_template="{message}",
        escape_special_characters=escape,
    )

    logger.info("Rebased 2 commits\nWorking copy now at: kxyz")
    logger.close()

    assert log_file.read_text() == expected
