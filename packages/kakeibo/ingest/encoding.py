"""Decode statement bytes, falling back to the legacy Japanese encoding.

Exports are expected in UTF-8, but older downloads from the same providers are
Shift_JIS. Decoding never raises: undecodable bytes become U+FFFD so that a
wrong guess simply fails detection and triggers the fallback.
"""

from __future__ import annotations

from ..logging_setup import get_logger
from ..models import DetectionResult, UnrecognizedFormatError
from .detect import detect_format

PRIMARY_ENCODING = "utf-8"
# cp932 is the Windows superset of Shift_JIS used by the providers' exports.
FALLBACK_ENCODING = "cp932"

_logger = get_logger("kakeibo.ingest.encoding")


def load_text(data: bytes, encoding: str = PRIMARY_ENCODING) -> str:
    """Decode ``data`` under ``encoding``, replacing invalid sequences."""

    text = data.decode(encoding, errors="replace")
    # Drop a leading BOM so the first header name stays clean.
    return text.removeprefix("\ufeff")


def decode_and_detect(data: bytes, *, name: str = "<bytes>") -> tuple[str, DetectionResult]:
    """Decode ``data`` and detect its format, trying UTF-8 then cp932.

    Raises ``UnrecognizedFormatError`` when neither decoding yields a known
    header signature.
    """

    text = load_text(data, PRIMARY_ENCODING)
    detection = detect_format(text)
    if detection.recognized:
        return text, detection

    _logger.debug("%s: no signature under %s; retrying %s", name, PRIMARY_ENCODING, FALLBACK_ENCODING)
    fallback_text = load_text(data, FALLBACK_ENCODING)
    fallback = detect_format(fallback_text)
    if fallback.recognized:
        return fallback_text, fallback

    raise UnrecognizedFormatError()


__all__ = ["PRIMARY_ENCODING", "FALLBACK_ENCODING", "load_text", "decode_and_detect"]
