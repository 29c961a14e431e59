from .base import (
    TaskStatus,
    get_reporter,
    get_verbosity,
    set_reporter,
    set_verbosity,
    task,
)
from .jsonl import JsonLinesReporter
from .plain import PlainReporter
from .rich_reporter import RichReporter
from .silent import SilentReporter

__all__ = [
    "TaskStatus",
    "get_reporter",
    "get_verbosity",
    "set_reporter",
    "set_verbosity",
    "task",
    "JsonLinesReporter",
    "PlainReporter",
    "RichReporter",
    "SilentReporter",
]
