"""Parser for one segment of an encode-job specification.

A segment is a comma-separated list of clauses:

    segment      = clause (',' clause)*
    clause       = enc | q | speed | profile | grain | compat | ext | bd
                 | res | aenc | ab | at | an | st
    track_list   = track_clause ('|' track_clause)*
    track_clause = identifier ('-' tag_letters)?

Productions are tried in a fixed priority order and the first whose key
matches wins. Once a key has matched, a malformed value is an error for
that filter; it never falls through to a later production.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from mp4batch.formats.errors import (
    FilterValueOutOfRangeError,
    FormatError,
    InvalidNumericLiteralError,
    UnknownAudioEncoderNameError,
    UnknownEncoderNameError,
    UnknownProfileError,
    UnrecognizedFilterError,
    UnsupportedBitDepthError,
    UnsupportedExtensionError,
)
from mp4batch.formats.models import (
    MIN_DIMENSION,
    SUPPORTED_BIT_DEPTHS,
    SUPPORTED_EXTENSIONS,
    AudioEncoder,
    Profile,
    VideoEncoderName,
)
from mp4batch.formats.tokens import (
    AudioBitrateFilter,
    AudioEncoderFilter,
    AudioNormalizeFilter,
    AudioTracksFilter,
    BitDepthFilter,
    CompatFilter,
    ExtensionFilter,
    FilterToken,
    GrainFilter,
    ProfileFilter,
    QuantizerFilter,
    ResolutionFilter,
    SpeedFilter,
    SubtitleTracksFilter,
    TrackSpec,
    VideoEncoderFilter,
)
from mp4batch.formats.tracks import TRACK_CLAUSE_RE, parse_track_clause

logger = logging.getLogger(__name__)

# Storage widths of the numeric filters
_I16 = (-(2**15), 2**15 - 1)
_U8 = (0, 2**8 - 1)
_U32 = (0, 2**32 - 1)

_ALNUM = re.compile(r"[A-Za-z0-9]+")
_ALPHA = re.compile(r"[A-Za-z]+")
_DIGITS = re.compile(r"[0-9]+")
_SIGNED_DIGITS = re.compile(r"-?[0-9]+")
_RESOLUTION = re.compile(r"([0-9]+)x([0-9]+)")
_TRACK_LIST = re.compile(
    rf"{TRACK_CLAUSE_RE.pattern}(?:\|{TRACK_CLAUSE_RE.pattern})*"
)
_NORMALIZE_FLAG = re.compile(r"1(?![A-Za-z0-9])")

_LEADING_SPACE = re.compile(r"\s*")
_SEPARATORS = re.compile(r"[\s,]*")
_RAW_VALUE = re.compile(r"[^,\s]*")


def _to_int(filter_name: str, literal: str, bounds: tuple[int, int]) -> int:
    """Convert a matched numeric literal, checking it fits its storage width."""
    try:
        value = int(literal)
    except ValueError:
        # Past the interpreter's digit limit for str -> int
        raise InvalidNumericLiteralError(
            filter_name, literal, "too many digits"
        ) from None
    low, high = bounds
    if not low <= value <= high:
        raise InvalidNumericLiteralError(
            filter_name, literal, f"does not fit in [{low}, {high}]"
        )
    return value


@dataclass(frozen=True)
class _Production:
    """One key=value clause form."""

    name: str
    key: re.Pattern[str]
    value: re.Pattern[str]
    build: Callable[[_SegmentParser, str, int], FilterToken]
    invalid: Callable[[str], FormatError]


def parse_filters(
    segment: str,
    source_file: Path,
    *,
    exists: Callable[[Path], bool] = Path.exists,
) -> list[FilterToken]:
    """Parse one specification segment into its filter tokens.

    Args:
        segment: Comma-separated clauses describing a single output.
        source_file: File the specification is attached to; used to
            resolve external track aliases.
        exists: Existence check for external track files.

    Returns:
        Filter tokens in the order their clauses appear.

    Raises:
        FormatError: On the first clause that fails to parse.
    """
    return _SegmentParser(segment, source_file, exists).parse()


class _SegmentParser:
    """Single-pass scanner over one segment."""

    def __init__(
        self,
        source: str,
        source_file: Path,
        exists: Callable[[Path], bool],
    ) -> None:
        self._source = source
        self._source_file = source_file
        self._exists = exists
        self._pos = 0

    def parse(self) -> list[FilterToken]:
        tokens: list[FilterToken] = []
        self._skip(_LEADING_SPACE)
        while self._pos < len(self._source):
            tokens.append(self._parse_clause())
            self._skip(_SEPARATORS)
        return tokens

    def _skip(self, pattern: re.Pattern[str]) -> None:
        match = pattern.match(self._source, self._pos)
        if match:
            self._pos = match.end()

    def _parse_clause(self) -> FilterToken:
        start = self._pos
        for production in _PRODUCTIONS:
            key = production.key.match(self._source, start)
            if key is None:
                continue
            value = production.value.match(self._source, key.end())
            try:
                if value is None:
                    raw = _RAW_VALUE.match(self._source, key.end())
                    raise production.invalid(raw.group(0) if raw else "")
                token = production.build(self, value.group(0), start)
            except FormatError as e:
                e.locate(self._source, start)
                raise
            logger.debug("Parsed %s clause at %d: %r", production.name, start, token)
            self._pos = value.end()
            return token

        raise UnrecognizedFilterError(
            self._source[start:], source=self._source, position=start
        )

    # --- Token builders ---

    def _video_encoder(self, text: str, position: int) -> FilterToken:
        name = text.lower()
        if name not in VideoEncoderName.supported_encoders():
            raise UnknownEncoderNameError(text, VideoEncoderName.supported_encoders())
        return VideoEncoderFilter(name, position=position)

    def _quantizer(self, text: str, position: int) -> FilterToken:
        return QuantizerFilter(_to_int("q", text, _I16), position=position)

    def _speed(self, text: str, position: int) -> FilterToken:
        return SpeedFilter(_to_int("s", text, _U8), position=position)

    def _profile(self, text: str, position: int) -> FilterToken:
        try:
            profile = Profile.from_name(text)
        except ValueError:
            raise UnknownProfileError(text, Profile.names()) from None
        return ProfileFilter(profile, position=position)

    def _grain(self, text: str, position: int) -> FilterToken:
        return GrainFilter(_to_int("grain", text, _U8), position=position)

    def _compat(self, text: str, position: int) -> FilterToken:
        return CompatFilter(_to_int("compat", text, _U8) > 0, position=position)

    def _extension(self, text: str, position: int) -> FilterToken:
        extension = text.lower()
        if extension not in SUPPORTED_EXTENSIONS:
            raise UnsupportedExtensionError(text, SUPPORTED_EXTENSIONS)
        return ExtensionFilter(extension, position=position)

    def _bit_depth(self, text: str, position: int) -> FilterToken:
        if text not in {str(b) for b in SUPPORTED_BIT_DEPTHS}:
            raise UnsupportedBitDepthError(text, SUPPORTED_BIT_DEPTHS)
        return BitDepthFilter(int(text), position=position)

    def _resolution(self, text: str, position: int) -> FilterToken:
        w, _, h = text.partition("x")
        width = _to_int("res", w, _U32)
        height = _to_int("res", h, _U32)
        if width % 2 != 0 or height % 2 != 0:
            raise FilterValueOutOfRangeError("res", text, "mod 2")
        if width < MIN_DIMENSION or height < MIN_DIMENSION:
            raise FilterValueOutOfRangeError(
                "res", text, f"at least {MIN_DIMENSION}x{MIN_DIMENSION}"
            )
        return ResolutionFilter(width, height, position=position)

    def _audio_encoder(self, text: str, position: int) -> FilterToken:
        name = text.lower()
        if name not in AudioEncoder.supported_encoders():
            raise UnknownAudioEncoderNameError(text, AudioEncoder.supported_encoders())
        return AudioEncoderFilter(name, position=position)

    def _audio_bitrate(self, text: str, position: int) -> FilterToken:
        return AudioBitrateFilter(_to_int("ab", text, _U32), position=position)

    def _tracks(self, text: str) -> tuple[TrackSpec, ...]:
        return tuple(
            parse_track_clause(clause, self._source_file, exists=self._exists)
            for clause in text.split("|")
        )

    def _audio_tracks(self, text: str, position: int) -> FilterToken:
        return AudioTracksFilter(self._tracks(text), position=position)

    def _audio_normalize(self, text: str, position: int) -> FilterToken:
        return AudioNormalizeFilter(position=position)

    def _subtitle_tracks(self, text: str, position: int) -> FilterToken:
        return SubtitleTracksFilter(self._tracks(text), position=position)


def _key(*names: str) -> re.Pattern[str]:
    return re.compile("(?:" + "|".join(re.escape(n) for n in names) + ")=")


def _invalid_number(name: str) -> Callable[[str], FormatError]:
    return lambda raw: InvalidNumericLiteralError(name, raw)


def _unrecognized(key: str) -> Callable[[str], FormatError]:
    return lambda raw: UnrecognizedFilterError(f"{key}={raw}")


# Priority order: first matching key wins
_PRODUCTIONS: tuple[_Production, ...] = (
    _Production(
        "enc",
        _key("enc"),
        _ALNUM,
        _SegmentParser._video_encoder,
        lambda raw: UnknownEncoderNameError(
            raw, VideoEncoderName.supported_encoders()
        ),
    ),
    _Production(
        "q",
        _key("q", "qp", "crf"),
        _SIGNED_DIGITS,
        _SegmentParser._quantizer,
        _invalid_number("q"),
    ),
    _Production(
        "s",
        _key("s", "speed"),
        _DIGITS,
        _SegmentParser._speed,
        _invalid_number("s"),
    ),
    _Production(
        "p",
        _key("p", "profile"),
        _ALPHA,
        _SegmentParser._profile,
        lambda raw: UnknownProfileError(raw, Profile.names()),
    ),
    _Production(
        "grain",
        _key("g", "grain"),
        _DIGITS,
        _SegmentParser._grain,
        _invalid_number("grain"),
    ),
    _Production(
        "compat",
        _key("compat"),
        _DIGITS,
        _SegmentParser._compat,
        _invalid_number("compat"),
    ),
    _Production(
        "ext",
        _key("ext"),
        _ALNUM,
        _SegmentParser._extension,
        lambda raw: UnsupportedExtensionError(raw, SUPPORTED_EXTENSIONS),
    ),
    _Production(
        "bd",
        _key("bd"),
        _DIGITS,
        _SegmentParser._bit_depth,
        lambda raw: UnsupportedBitDepthError(raw, SUPPORTED_BIT_DEPTHS),
    ),
    _Production(
        "res",
        _key("res"),
        _RESOLUTION,
        _SegmentParser._resolution,
        lambda raw: InvalidNumericLiteralError(
            "res", raw, "expected <width>x<height>"
        ),
    ),
    _Production(
        "aenc",
        _key("aenc"),
        _ALNUM,
        _SegmentParser._audio_encoder,
        lambda raw: UnknownAudioEncoderNameError(
            raw, AudioEncoder.supported_encoders()
        ),
    ),
    _Production(
        "ab",
        _key("ab"),
        _DIGITS,
        _SegmentParser._audio_bitrate,
        _invalid_number("ab"),
    ),
    _Production(
        "at",
        _key("at"),
        _TRACK_LIST,
        _SegmentParser._audio_tracks,
        _unrecognized("at"),
    ),
    _Production(
        "an",
        _key("an"),
        _NORMALIZE_FLAG,
        _SegmentParser._audio_normalize,
        _unrecognized("an"),
    ),
    _Production(
        "st",
        _key("st"),
        _TRACK_LIST,
        _SegmentParser._subtitle_tracks,
        _unrecognized("st"),
    ),
)
