"""Gzip + JSON codec for QWeather response bodies.

QWeather always answers with a gzip compressed octet stream, whatever the
``Accept`` header says, so bodies are read raw and decoded here.
"""
import gzip
import json
from typing import Any


def decode_gzip_json(data: bytes) -> Any:
    """Decompress a gzip body and parse it as a UTF-8 JSON document.

    Raises ``OSError`` (``gzip.BadGzipFile``) if ``data`` is not gzip and
    ``json.JSONDecodeError`` if the decompressed text is not JSON.
    """
    text = gzip.decompress(data).decode("utf-8")
    return json.loads(text)


def encode_gzip_json(document: Any) -> bytes:
    """Inverse of :func:`decode_gzip_json`."""
    return gzip.compress(json.dumps(document, ensure_ascii=False).encode("utf-8"))
