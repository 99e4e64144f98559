#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/ltxtree/utils/encoding.py
"""Character encoding detection and source decoding.

LaTeX sources in the wild come in UTF-8, Latin-1 and the Cyrillic code
pages. When the caller does not declare an encoding, chardet picks one and a
short list of fallbacks covers low-confidence results.
"""

from __future__ import annotations

import logging
from pathlib import Path

import chardet

from ltxtree.exceptions import MissingResourceError

logger = logging.getLogger(__name__)

FALLBACK_ENCODINGS = ("utf-8", "utf-8-sig", "cp1251", "latin-1")


def detect_encoding(
    data: bytes,
    sample_size: int = 8192,
    confidence_threshold: float = 0.7,
) -> str | None:
    """Detect the character encoding of binary data using chardet.

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
        Detected encoding name, or None when detection fails or the
        confidence is below the threshold

    """
    sample = data[:sample_size]
    result = chardet.detect(sample)
    if not result or not result.get("encoding"):
        logger.debug("chardet: No encoding detected")
        return None

    encoding = result["encoding"]
    confidence = result.get("confidence") or 0.0
    logger.debug("chardet detected encoding: %s (confidence: %.2f)", encoding, confidence)

    if confidence >= confidence_threshold:
        return encoding
    logger.debug("chardet confidence %.2f below threshold %s", confidence, confidence_threshold)
    return None


def decode_source(data: bytes, encoding: str | None = None) -> str:
    """Decode source bytes.

    Parameters
    ----------
    data : bytes
        Raw file contents
    encoding : str or None
        Declared encoding; None detects it with chardet and then tries
        :data:`FALLBACK_ENCODINGS` in order

    Returns
    -------
    str
        Decoded text

    Raises
    ------
    UnicodeDecodeError
        If a declared encoding does not match the data

    """
    if encoding is not None:
        return data.decode(encoding)

    candidates: list[str] = []
    detected = detect_encoding(data)
    if detected:
        candidates.append(detected)
    candidates.extend(FALLBACK_ENCODINGS)

    for candidate in candidates:
        try:
            return data.decode(candidate)
        except (UnicodeDecodeError, LookupError):
            logger.debug("Decoding with %s failed", candidate)

    return data.decode("utf-8", errors="replace")


def read_source(path: str | Path, encoding: str | None = None, resource_kind: str = "source") -> str:
    """Read and decode a text file.

    Raises
    ------
    MissingResourceError
        If the file does not exist or cannot be read

    """
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise MissingResourceError(str(file_path), resource_kind, original_error=exc) from exc
    return decode_source(data, encoding)
