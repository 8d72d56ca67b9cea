"""Error types for the encode-job specification language.

Every error is terminal for the segment being parsed. Errors carry the
segment text and the offset of the failing clause so callers can point
at the problem with format_error().
"""

from __future__ import annotations

from pathlib import Path


class FormatError(Exception):
    """Base class for specification parsing and resolution errors."""

    def __init__(
        self,
        message: str,
        source: str = "",
        position: int = 0,
    ) -> None:
        self.source = source
        self.position = position
        self.segment_index: int | None = None
        super().__init__(message)

    def locate(self, source: str, position: int | None = None) -> None:
        """Attach the segment text, and optionally the offset, if not known."""
        if self.source:
            return
        self.source = source
        if position is not None:
            self.position = position

    def format_error(self) -> str:
        """Format error with caret pointing at the problem position."""
        msg = str(self)
        if self.segment_index is not None:
            msg = f"Segment {self.segment_index + 1}: {msg}"
        if not self.source:
            return msg
        caret = " " * self.position + "^"
        return f"{msg}\n  {self.source}\n  {caret}"


class UnrecognizedFilterError(FormatError):
    """Raised when no filter production matches at the current position."""

    def __init__(self, remainder: str, source: str = "", position: int = 0) -> None:
        self.remainder = remainder
        super().__init__(
            f"Unrecognized filter: '{remainder}'", source=source, position=position
        )


class UnknownEncoderNameError(FormatError):
    """Raised when enc= names an unsupported video encoder."""

    def __init__(self, name: str, supported: tuple[str, ...]) -> None:
        self.name = name
        self.supported = supported
        super().__init__(
            f"Unrecognized video encoder: '{name}' "
            f"(expected one of: {', '.join(supported)})"
        )


class UnknownAudioEncoderNameError(FormatError):
    """Raised when aenc= names an unsupported audio encoder."""

    def __init__(self, name: str, supported: tuple[str, ...]) -> None:
        self.name = name
        self.supported = supported
        super().__init__(
            f"Unrecognized audio encoder: '{name}' "
            f"(expected one of: {', '.join(supported)})"
        )


class UnknownProfileError(FormatError):
    """Raised when p= names an unknown encoding profile."""

    def __init__(self, name: str, supported: tuple[str, ...]) -> None:
        self.name = name
        self.supported = supported
        super().__init__(
            f"Unrecognized profile: '{name}' (expected one of: {', '.join(supported)})"
        )


class UnsupportedExtensionError(FormatError):
    """Raised when ext= names a container other than mp4 or mkv."""

    def __init__(self, extension: str, supported: tuple[str, ...]) -> None:
        self.extension = extension
        self.supported = supported
        super().__init__(
            f"Unsupported extension: '{extension}' "
            f"(expected one of: {', '.join(supported)})"
        )


class UnsupportedBitDepthError(FormatError):
    """Raised when bd= is not 8 or 10."""

    def __init__(self, bit_depth: str, supported: tuple[int, ...]) -> None:
        self.bit_depth = bit_depth
        self.supported = supported
        super().__init__(
            f"Unsupported bit depth: '{bit_depth}' "
            f"(expected one of: {', '.join(str(b) for b in supported)})"
        )


class InvalidNumericLiteralError(FormatError):
    """Raised when a numeric clause value is not a valid integer."""

    def __init__(self, filter_name: str, literal: str, reason: str = "") -> None:
        self.filter_name = filter_name
        self.literal = literal
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Invalid numeric value for '{filter_name}': '{literal}'{detail}"
        )


class FilterValueOutOfRangeError(FormatError):
    """Raised when a filter value falls outside its allowed bound."""

    def __init__(
        self,
        filter_name: str,
        value: object,
        allowed_range: str,
    ) -> None:
        self.filter_name = filter_name
        self.value = value
        self.allowed_range = allowed_range
        super().__init__(
            f"'{filter_name}' must be {allowed_range}, received {value}"
        )


class InvalidAudioBitrateError(FilterValueOutOfRangeError):
    """Raised when ab= is zero."""

    def __init__(self, value: int) -> None:
        super().__init__("ab", value, "greater than 0")


class MissingTrackFileError(FormatError):
    """Raised when an external track alias points at a file that doesn't exist."""

    def __init__(self, path: Path, identifier: str) -> None:
        self.path = path
        self.identifier = identifier
        super().__init__(f"Track file for '{identifier}' not found: {path}")
