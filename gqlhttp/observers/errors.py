from __future__ import annotations
from dataclasses import dataclass, field
from logging import Logger, getLogger
from os import getcwd
from os.path import dirname
from sysconfig import get_paths
from traceback import format_exception
from typing import Iterable, Protocol
import graphql
from graphql import GraphQLError

_RULE = "|---------------------------------------------------------------------------"
_GRAPHQL_DIR = dirname(graphql.__file__)
_STDLIB_DIRS = tuple({get_paths()["stdlib"], get_paths()["platstdlib"]})
_SITE_DIRS = tuple({get_paths()["purelib"], get_paths()["platlib"]})

logger = getLogger(__name__)


@dataclass(slots=True)
class ErrorEvent:
    kind: str
    message: str
    stack: list[str] = field(default_factory=list)
    request_id: str | None = None

    @classmethod
    def from_graphql_error(
        cls, error: GraphQLError, request_id: str | None = None
    ) -> ErrorEvent:
        original = error.original_error
        stack: list[str] = []
        if original is not None and original.__traceback__ is not None:
            stack = format_exception(type(original), original, original.__traceback__)
        return cls(
            kind="graphql", message=error.message, stack=stack, request_id=request_id
        )


@dataclass(slots=True)
class SlowResponseEvent:
    elapsed_ms: float
    query: str
    request_id: str | None = None


class ExecutionObserver(Protocol):
    def on_error(self, event: ErrorEvent) -> None: ...

    def on_slow_response(self, event: SlowResponseEvent) -> None: ...


def filter_stack(lines: Iterable[str], cwd: str | None = None) -> list[str]:
    """Drop library and interpreter frames, make the rest relative to ``cwd``."""
    cwd = getcwd() if cwd is None else cwd
    kept = []
    skipping = False
    for line in lines:
        for row in line.rstrip("\n").splitlines():
            stripped = row.strip()
            if stripped.startswith('File "'):
                skipping = is_library_frame(stripped[6:].split('"', 1)[0])
            elif not row.startswith("    "):
                skipping = False
            if skipping:
                continue
            kept.append(row.replace(cwd, "") if cwd else row)
    return kept


def is_library_frame(path: str) -> bool:
    if path.startswith(_GRAPHQL_DIR):
        return True
    # site-packages may live below the standard library directory
    return path.startswith(_STDLIB_DIRS) and not path.startswith(_SITE_DIRS)


class LoggingObserver:
    """Writes execution events to a standard library logger."""

    def __init__(self, log: Logger | None = None, show_full_stack_trace=False):
        self.logger = log or logger
        self.show_full_stack_trace = show_full_stack_trace

    def on_error(self, event: ErrorEvent) -> None:
        prefix = f"rid={event.request_id} " if event.request_id else ""
        if self.show_full_stack_trace:
            self.logger.error("%s%s", prefix, event.message)
            if event.stack:
                self.logger.error("%s", "".join(event.stack))
            return
        block = [
            "",
            "",
            _RULE,
            f"|  {event.kind} error",
            _RULE,
            "|",
            f"|  {prefix}{event.message}",
            "|  ...",
        ]
        block.extend(f"|  {line}" for line in filter_stack(event.stack))
        block.extend(["|  ...", _RULE])
        self.logger.error("%s", "\n".join(block))

    def on_slow_response(self, event: SlowResponseEvent) -> None:
        self.logger.warning("------------------ slow response -------------------")
        self.logger.warning(
            "%sresponse time: %.2fms",
            f"rid={event.request_id} " if event.request_id else "",
            event.elapsed_ms,
        )
        for line in event.query.split("\n"):
            self.logger.warning("%s", line)
