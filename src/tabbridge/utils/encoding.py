#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/utils/encoding.py
"""Character encoding detection for delimited-text files.

Text files are decoded with chardet-based detection and a fallback chain.
The encoding that succeeded is returned alongside the text so the file can
be written back in the same encoding (including a UTF-8 byte order mark).
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

from tabbridge.constants import (
    DEFAULT_ENCODING_CONFIDENCE,
    DEFAULT_ENCODING_SAMPLE_SIZE,
    DEFAULT_TEXT_FALLBACK_ENCODINGS,
)
from tabbridge.exceptions import FileAccessError

logger = logging.getLogger(__name__)

# Encodings widened on write so edits may introduce characters the original lacked
_WIDENED_ENCODINGS = {"ascii": "utf-8"}


def detect_encoding(
    data: bytes,
    sample_size: int = DEFAULT_ENCODING_SAMPLE_SIZE,
    confidence_threshold: float = DEFAULT_ENCODING_CONFIDENCE,
) -> str | None:
    """Detect character encoding of binary data using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of bytes to sample for detection (uses first N bytes)
    confidence_threshold : float, default 0.7
        Minimum confidence level (0.0-1.0) required to trust detection

    Returns
    -------
    str | None
        Detected encoding name (lower-case), or None if chardet is not
        available, detection fails, or confidence is below threshold

    """
    try:
        import chardet
    except ImportError:
        logger.debug("chardet not available for encoding detection")
        return None

    sample = data[:sample_size] if len(data) > sample_size else data
    result = chardet.detect(sample)

    if not result or not result.get("encoding"):
        logger.debug("chardet: No encoding detected")
        return None

    encoding = result["encoding"].lower()
    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")

    if confidence >= confidence_threshold:
        return encoding

    logger.debug(f"chardet confidence {confidence:.2f} below threshold {confidence_threshold}")
    return None


def _canonical_encoding(encoding: str, data: bytes) -> str:
    name = codecs.lookup(encoding).name
    if name == "utf-8-sig" and not data.startswith(codecs.BOM_UTF8):
        # utf-8-sig decodes BOM-less input too; writing it back must not add a BOM
        return "utf-8"
    return _WIDENED_ENCODINGS.get(name, name)


def decode_text(
    data: bytes,
    fallback_encodings: list[str] | None = None,
    use_chardet: bool = True,
) -> tuple[str, str]:
    """Decode file bytes, returning the text and the encoding to write it back with.

    Attempts, in order:
    1. chardet-based detection (if enabled and available)
    2. Fallback encodings in order (utf-8-sig, utf-8, latin-1 by default)

    Parameters
    ----------
    data : bytes
        Binary data to decode
    fallback_encodings : list[str] | None, default None
        Encodings to try in order after detection
    use_chardet : bool, default True
        Whether to attempt chardet-based detection first

    Returns
    -------
    tuple[str, str]
        Decoded text and the canonical encoding name

    Raises
    ------
    UnicodeDecodeError
        If no encoding decodes the data (not reachable while latin-1 is a fallback)

    Examples
    --------
    >>> decode_text(b"a,b\\n1,2\\n")
    ('a,b\\n1,2\\n', 'utf-8')

    """
    if fallback_encodings is None:
        fallback_encodings = DEFAULT_TEXT_FALLBACK_ENCODINGS

    candidates: list[str] = []
    if data.startswith(codecs.BOM_UTF8):
        candidates.append("utf-8-sig")
    if use_chardet:
        detected = detect_encoding(data)
        if detected:
            candidates.append(detected)
    candidates.extend(fallback_encodings)

    last_error: UnicodeDecodeError | None = None
    for encoding in candidates:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError as e:
            logger.debug(f"Failed to decode with {encoding}: {e}")
            last_error = e
            continue
        except LookupError as e:
            logger.debug(f"Unknown encoding {encoding}: {e}")
            continue

        canonical = _canonical_encoding(encoding, data)
        logger.debug(f"Decoded text as {canonical}")
        return text, canonical

    if last_error is not None:
        raise last_error
    raise UnicodeDecodeError("utf-8", data, 0, len(data), "no usable encoding")


def read_text_file(path: Path, encoding: str | None = None) -> tuple[str, str]:
    """Read and decode a delimited-text file.

    Parameters
    ----------
    path : Path
        File to read
    encoding : str, optional
        Encoding to use instead of detecting one

    Returns
    -------
    tuple[str, str]
        Decoded text and the encoding to write it back with

    Raises
    ------
    FileAccessError
        If the file cannot be read or decoded

    """
    try:
        data = path.read_bytes()
        if encoding:
            return data.decode(encoding), encoding
        return decode_text(data)
    except (OSError, UnicodeDecodeError, LookupError) as e:
        raise FileAccessError(str(path), message=f"Cannot read {path}: {e}", original_error=e) from e
