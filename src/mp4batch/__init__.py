"""mp4batch - Resolve compact encode-job specifications into output configurations."""

__version__ = "2.0.0"
