#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/utils/__init__.py
"""Utility modules for the tabbridge package.

This package contains encoding detection and dependency-checking helpers.
"""

from tabbridge.utils.encoding import decode_text, detect_encoding, read_text_file

__all__ = [
    "decode_text",
    "detect_encoding",
    "read_text_file",
]
