"""
Helpers for pulling JSON out of generated text.
"""
import json
from typing import Any, Sequence

_decoder = json.JSONDecoder()


def extract_json(text: str, markers: Sequence[str] = ("[", "{")) -> Any:
    """
    Parse the first JSON value in ``text`` that starts with one of ``markers``.

    The earliest marker in the text is tried first; prose before the value
    and anything after it are ignored.

    Raises:
        ValueError: No marker is present or no value parses
    """
    starts = sorted(text.find(marker) for marker in markers if marker in text)
    last_error: Exception = ValueError(f"no JSON value starting with {' or '.join(markers)}")
    for index in starts:
        try:
            value, _ = _decoder.raw_decode(text, index)
            return value
        except json.JSONDecodeError as e:
            last_error = e
    raise ValueError(str(last_error))
