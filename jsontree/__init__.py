"""Mutable JSON value trees with UTF-8 checking, real formatting and format-string packing."""

__version__ = "0.1.0"
__all__ = ["utf", "strconv", "value", "pack"]