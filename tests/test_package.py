"""Tests for mp4batch package."""


def test_package_imports():
    """Test that the package can be imported successfully."""
    import mp4batch

    assert mp4batch is not None


def test_package_version():
    """Test that the package has a version string."""
    from mp4batch import __version__

    assert __version__ == "2.0.0"


def test_formats_public_api():
    """Test that the specification API is re-exported."""
    from mp4batch.formats import __all__ as exported

    for name in ("resolve", "parse_filters", "resolve_output", "FormatError"):
        assert name in exported
