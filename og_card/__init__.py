"""OpenGraph preview image generation for software packages, rendered with Typst."""

__version__ = "0.1.0"

__all__ = ["data", "env", "errors", "formatting", "generator"]