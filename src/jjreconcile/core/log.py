"""Logging for jjreconcile.

Everything goes through logfire. A `Logger` owns up to three sinks:
the logfire console renderer, a file and an OTLP exporter. The module
level `logger` proxy forwards to whichever Logger `setup_logger()`
installed last.
"""

from __future__ import annotations

import contextlib
import os
from abc import abstractmethod
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from opentelemetry.proto.logs.v1 import logs_pb2
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult
from pydantic import Field, PrivateAttr, model_validator

from jjreconcile.core.base import BaseConfig

# Level name -> OpenTelemetry severity number. "spew" sits below trace
# and is meant for subprocess chatter.
LEVELS = {
    "spew": logs_pb2.SEVERITY_NUMBER_TRACE,
    "trace": logs_pb2.SEVERITY_NUMBER_TRACE3,
    "debug": logs_pb2.SEVERITY_NUMBER_DEBUG,
    "info": logs_pb2.SEVERITY_NUMBER_INFO,
    "warn": logs_pb2.SEVERITY_NUMBER_WARN,
    "error": logs_pb2.SEVERITY_NUMBER_ERROR,
    "fatal": logs_pb2.SEVERITY_NUMBER_FATAL,
}

# RFC 5424 severity per level name, for the {priority} template field
_SYSLOG_SEVERITY = {"fatal": 2, "error": 3, "warn": 4, "info": 6}

# Span attributes that are bookkeeping, not caller keyword arguments
_INTERNAL_ATTRIBUTES = {
    "code.filepath", "code.lineno", "code.function",
    "logfire.msg", "logfire.msg_template", "logfire.level_num",
    "logfire.span_type", "logfire.json_schema",
}
_INTERNAL_PREFIXES = ("otel.", "telemetry.", "service.", "process.")

_current_logger: Logger | None = None


def level_number(name: str | None) -> int:
    """Severity number for a level name; unknown names mean info."""
    return LEVELS.get((name or "info").lower(), LEVELS["info"])


def level_name(number: int) -> str:
    """Highest level name whose severity number is <= number."""
    for name in ("fatal", "error", "warn", "info", "debug", "trace", "spew"):
        if number >= LEVELS[name]:
            return name
    return "unknown"


class _LoggerProxy:
    """Forwards attribute access to the configured Logger.

    Before setup_logger() runs every method is a no-op.
    """

    def __getattr__(self, name):
        if _current_logger is None:
            def _noop(*args, **kwargs):  # noqa: ARG001
                pass
            return _noop
        return getattr(_current_logger, name)

    def __enter__(self):
        if _current_logger is not None:
            _current_logger.__enter__()
        return self

    def __exit__(self, *args):
        if _current_logger is None:
            return False
        return _current_logger.__exit__(*args)


logger = _LoggerProxy()


class LevelFilteringExporter(SpanExporter):
    """Drops spans below a sink's level before handing them on."""

    def __init__(self, exporter: SpanExporter, min_level: str | None):
        self._exporter = exporter
        self._threshold = level_number(min_level)

    def export(self, spans: list[ReadableSpan]) -> SpanExportResult:
        kept = [span for span in spans if _span_level(span) >= self._threshold]
        if not kept:
            return SpanExportResult.SUCCESS
        return self._exporter.export(kept)

    def shutdown(self) -> None:
        self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._exporter.force_flush(timeout_millis)


def _span_level(span) -> int:
    return (span.attributes or {}).get("logfire.level_num", LEVELS["info"])


class Sink(BaseConfig):
    """One log destination. Closed through Logger's close cascade."""

    enabled: bool = Field(default=True, description="Enable this sink")
    level: str | None = Field(
        default=None,
        description=(
            "Minimum level for this sink, or None for Logger.level. "
            "Valid: spew, trace, debug, info, warn, error, fatal"
        ),
    )
    escape_special_characters: bool = Field(
        default=False,
        description="Write newlines and tabs in messages as \\n and \\t",
    )
    format_template: str | None = Field(
        default=None,
        description=(
            "str.format template with timestamp, level, message, "
            "filepath, lineno, location, function and priority fields; "
            "None writes span JSON"
        ),
    )

    _processor: Any = PrivateAttr(default=None)

    @abstractmethod
    def create_processor(self, log_root: Path, run_name: str):
        """Span processor for this sink, or None if logfire handles it."""

    def render(self, span) -> str:
        """Format one span as a line of output."""
        if not self.format_template:
            return span.to_json() + os.linesep

        attrs = dict(span.attributes or {})
        level = level_name(_span_level(span))
        message = attrs.get("logfire.msg", span.name)
        if self.escape_special_characters:
            message = (
                message.replace("\\", "\\\\")
                .replace("\n", "\\n")
                .replace("\r", "\\r")
                .replace("\t", "\\t")
            )
        filepath = attrs.get("code.filepath", "")
        lineno = attrs.get("code.lineno", "")

        try:
            line = self.format_template.format(
                timestamp=datetime.fromtimestamp(
                    span.start_time / 1e9, tz=UTC
                ),
                level=level,
                message=message,
                filepath=filepath,
                lineno=lineno,
                location=f"{filepath}:{lineno}" if filepath else "",
                function=attrs.get("code.function", ""),
                # facility user(1)
                priority=8 + _SYSLOG_SEVERITY.get(level, 7),
            )
        except KeyError as e:
            return f"ERROR: Invalid template field {e}\n"

        extra = sorted(
            (key, value) for key, value in attrs.items()
            if key not in _INTERNAL_ATTRIBUTES
            and not key.startswith(_INTERNAL_PREFIXES)
        )
        if extra:
            line += " │ " + " ".join(f"{k}={v!r}" for k, v in extra)
        return line + "\n"

    def close(self):
        if self._processor:
            with contextlib.suppress(Exception):
                self._processor.shutdown()


class ConsoleSink(Sink):
    """Terminal output, rendered by logfire's own console exporter."""

    verbose: bool = Field(default=False, description="Show span details")
    colors: str = Field(
        default="auto",
        description="Color mode: auto, always, never",
    )

    def create_processor(self, log_root: Path, run_name: str):
        return None

    def console_options(self):
        from logfire import ConsoleOptions

        if not self.enabled:
            return False
        return ConsoleOptions(
            min_log_level=self.level,
            verbose=self.verbose,
            colors=self.colors,
            include_timestamps=True,
        )


class OTLPSink(Sink):
    """Span export to an OTLP collector (SigNoz, Jaeger, ...)."""

    enabled: bool = Field(default=False, description="Enable OTLP export")
    endpoint: str = Field(
        default="http://localhost:4317",
        description="OTLP gRPC endpoint",
    )
    insecure: bool = Field(default=True, description="Disable TLS")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers, e.g. for authentication",
    )

    def create_processor(self, log_root: Path, run_name: str):
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        exporter = OTLPSpanExporter(
            endpoint=self.endpoint,
            insecure=self.insecure,
            headers=self.headers or None,
        )
        if self.level:
            exporter = LevelFilteringExporter(exporter, self.level)
        return BatchSpanProcessor(exporter)


class FileSink(Sink):
    """Append-only log file, one rendered span per line."""

    enabled: bool = Field(default=False, description="Enable file logging")
    path: str = Field(
        default="{log_root}/{run_name}/jjreconcile.log",
        description="Log file path; {log_root} and {run_name} are filled in",
    )

    _file: Any = PrivateAttr(default=None)

    def create_processor(self, log_root: Path, run_name: str):
        from opentelemetry.sdk.trace.export import (
            BatchSpanProcessor,
            ConsoleSpanExporter,
        )

        log_path = Path(self.path.format(log_root=log_root, run_name=run_name))
        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(log_path, "a", buffering=1, encoding="utf-8")  # noqa: SIM115

        return BatchSpanProcessor(
            LevelFilteringExporter(
                ConsoleSpanExporter(out=self._file, formatter=self.render),
                self.level,
            )
        )

    def close(self):
        super().close()
        if self._file and not self._file.closed:
            with contextlib.suppress(Exception):
                self._file.flush()
                self._file.close()


class Logger(BaseConfig):
    """Configured sinks plus the logging methods used across the tool.

    `with logger:` closes every sink on exit.
    """

    level: str = Field(
        default="info",
        description=(
            "Level for sinks that set none. "
            "Valid: spew, trace, debug, info, warn, error, fatal"
        ),
    )
    console: ConsoleSink = Field(default_factory=ConsoleSink)
    file: FileSink = Field(default_factory=FileSink)
    otlp: OTLPSink = Field(default_factory=OTLPSink)

    @model_validator(mode="after")
    def _inherit_level(self) -> Logger:
        for sink in (self.console, self.file):
            if sink.level is None:
                sink.level = self.level
        return self

    def setup(self, log_root: Path, run_name: str):
        """Open the sinks and point logfire at them."""
        import logfire

        processors = []
        for sink in (self.console, self.file, self.otlp):
            if sink.enabled:
                sink._processor = sink.create_processor(log_root, run_name)
                if sink._processor is not None:
                    processors.append(sink._processor)

        logfire.configure(
            service_name=f"jjreconcile-{run_name}",
            send_to_logfire=False,
            console=self.console.console_options(),
            additional_span_processors=processors or None,
        )

    def close(self):
        """Flush pending spans, then close every sink."""
        import logfire

        with contextlib.suppress(Exception):
            logfire.force_flush()
        super().close()

    def _emit(self, level, msg: str, attributes: dict):
        import logfire
        logfire.log(
            level=level, msg_template=msg, attributes=attributes or None
        )

    def spew(self, msg: str, **kwargs):
        self._emit(LEVELS["spew"], msg, kwargs)

    def trace(self, msg: str, **kwargs):
        self._emit(LEVELS["trace"], msg, kwargs)

    def debug(self, msg: str, **kwargs):
        self._emit("debug", msg, kwargs)

    def info(self, msg: str, **kwargs):
        self._emit("info", msg, kwargs)

    def warning(self, msg: str, **kwargs):
        self._emit("warn", msg, kwargs)

    def error(self, msg: str, **kwargs):
        self._emit("error", msg, kwargs)

    def span(self, msg: str, **kwargs):
        """Context manager grouping the log lines emitted inside it."""
        import logfire
        return logfire.span(msg, **kwargs)


def setup_logger(
    log_root: Path,
    run_name: str,
    console: ConsoleSink | None = None,
    otlp: OTLPSink | None = None,
    file: FileSink | None = None,
    level: str = "info",
) -> Logger:
    """Install a new global Logger and return it.

    Config calls this once settings are loaded; tests call it
    directly. Sinks left as None get their defaults.
    """
    global _current_logger

    _current_logger = Logger(
        level=level,
        console=console or ConsoleSink(),
        otlp=otlp or OTLPSink(),
        file=file or FileSink(),
    )
    _current_logger.setup(log_root, run_name)
    return _current_logger


__all__ = [
    "logger",
    "setup_logger",
    "Logger",
    "ConsoleSink",
    "FileSink",
    "OTLPSink",
    "LevelFilteringExporter",
    "LEVELS",
]
