"""Track reference resolution for at= and st= clauses.

A track clause is ``<identifier>[-<tags>]``. A numeric identifier selects a
stream of the source video; anything else is an extension alias naming a
sibling file of the source (``ac3`` next to ``movie.vpy`` is ``movie.ac3``).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path

from mp4batch.formats.errors import (
    InvalidNumericLiteralError,
    MissingTrackFileError,
    UnrecognizedFilterError,
)
from mp4batch.formats.tokens import External, FromVideo, TrackSource, TrackSpec

logger = logging.getLogger(__name__)

# <identifier>[-<tag letters>]
TRACK_CLAUSE_RE = re.compile(r"[A-Za-z0-9.]+(?:-[A-Za-z]+)?")

_ENABLED_TAGS = frozenset("de")
_FORCED_TAGS = frozenset("f")


def resolve_track_source(
    identifier: str,
    source_file: Path,
    *,
    exists: Callable[[Path], bool] = Path.exists,
) -> TrackSource:
    """Resolve a track identifier against the specification's source file.

    Args:
        identifier: Stream index or extension alias.
        source_file: File the specification is attached to.
        exists: Existence check for alias targets.

    Returns:
        FromVideo for numeric identifiers, External for aliases.

    Raises:
        InvalidNumericLiteralError: If a stream index has too many digits to
            convert.
        MissingTrackFileError: If an alias names a file that doesn't exist.
    """
    if identifier.isascii() and identifier.isdigit():
        try:
            return FromVideo(int(identifier))
        except ValueError:
            raise InvalidNumericLiteralError(
                "track", identifier, "too many digits"
            ) from None

    path = source_file.with_name(f"{source_file.stem}.{identifier}")
    if not exists(path):
        raise MissingTrackFileError(path, identifier)
    logger.debug("Resolved track alias %s to %s", identifier, path)
    return External(path)


def parse_track_clause(
    clause: str,
    source_file: Path,
    *,
    exists: Callable[[Path], bool] = Path.exists,
) -> TrackSpec:
    """Parse a single ``<identifier>[-<tags>]`` clause into a TrackSpec.

    Tag letters ``d`` and ``e`` mark the track enabled (default) and ``f``
    marks it forced. Without tags both flags are false.

    Raises:
        UnrecognizedFilterError: If the clause is malformed or has unknown tags.
        MissingTrackFileError: If an alias names a file that doesn't exist.
    """
    if not TRACK_CLAUSE_RE.fullmatch(clause):
        raise UnrecognizedFilterError(clause)

    identifier, _, tags = clause.partition("-")
    unknown = set(tags) - _ENABLED_TAGS - _FORCED_TAGS
    if unknown:
        raise UnrecognizedFilterError(clause)

    return TrackSpec(
        source=resolve_track_source(identifier, source_file, exists=exists),
        enabled=any(t in _ENABLED_TAGS for t in tags),
        forced=any(t in _FORCED_TAGS for t in tags),
    )
