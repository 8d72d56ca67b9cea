"""Input file context for structured logging.

While an input is being resolved its path is held in a context variable, so
every record logged meanwhile (from the parser, the resolver or the CLI) can
be attributed to that input without passing it through each call.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_source_file: contextvars.ContextVar[Path | None] = contextvars.ContextVar(
    "source_file", default=None
)


@contextmanager
def input_context(source_file: Path) -> Generator[None, None, None]:
    """Attribute records logged inside the block to an input file.

    Example:
        with input_context(Path("/media/ep01.vpy")):
            resolve(specification, source_file)
    """
    token = _source_file.set(source_file)
    try:
        yield
    finally:
        _source_file.reset(token)


def current_input() -> Path | None:
    """Input file currently being resolved, if any."""
    return _source_file.get()


class InputContextFilter(logging.Filter):
    """Inject the current input file into log records.

    Sets ``source_file`` (the path, for JSON output) and ``input_tag``
    (``"[ep01.vpy] "`` or empty, for the text format). A ``source_file``
    passed explicitly through ``extra=`` is kept.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        source_file = getattr(record, "source_file", None) or current_input()
        record.source_file = source_file
        record.input_tag = f"[{Path(source_file).name}] " if source_file else ""
        return True
