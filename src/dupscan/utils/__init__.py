"""Formatting helpers used by renderers and the CLI."""

from .convert_utils import ConvertUtils

__all__ = ["ConvertUtils"]
