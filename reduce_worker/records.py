"""
KeyValue records and their on-disk encoding.

Intermediate and output files hold one JSON object per line:
    {"key": "<string>", "value": "<string>"}
"""

import json
from typing import IO, Iterator, NamedTuple, Optional, Tuple


class KeyValue(NamedTuple):
    """A single key/value pair emitted by a map or reduce task"""
    key: str
    value: str


# (line number, record, error reason); exactly one of record/reason is None
DecodedLine = Tuple[int, Optional[KeyValue], Optional[str]]


def _check_utf8(field: str, text: str):
    # json escapes can smuggle in lone surrogates, which utf-8 cannot hold
    try:
        text.encode('utf-8')
    except UnicodeEncodeError as e:
        raise ValueError(f"{field} is not encodable as utf-8: {e.reason}")


def decode_line(raw: bytes) -> KeyValue:
    """
    Decode one encoded record

    Raises:
        ValueError: If the line is not a well-formed record
    """
    try:
        text = raw.decode('utf-8')
    except UnicodeDecodeError as e:
        raise ValueError(f"invalid utf-8: {e}")

    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid json: {e.msg}")

    if not isinstance(obj, dict):
        raise ValueError(f"expected object, got {type(obj).__name__}")
    if 'key' not in obj or 'value' not in obj:
        raise ValueError("record must have 'key' and 'value' fields")

    key, value = obj['key'], obj['value']
    if not isinstance(key, str) or not isinstance(value, str):
        raise ValueError("'key' and 'value' must be strings")
    _check_utf8('key', key)
    _check_utf8('value', value)
    return KeyValue(key, value)


def iter_records(f: IO[bytes]) -> Iterator[DecodedLine]:
    """
    Lazily decode records from a file opened in binary mode.

    Malformed lines do not stop the stream; they are yielded with an error
    reason so the caller decides whether to skip or fail. Blank lines are
    ignored. The iterator ends at end of file.

    Args:
        f: Binary file object positioned at the first record

    Yields:
        (line_no, record, None) for good lines, (line_no, None, reason) for
        malformed ones
    """
    for line_no, raw in enumerate(f, start=1):
        raw = raw.strip()
        if not raw:
            continue
        try:
            yield line_no, decode_line(raw), None
        except ValueError as e:
            yield line_no, None, str(e)


def encode_record(kv: KeyValue) -> str:
    """
    Serialize a record to a single newline-terminated line

    Raises:
        ValueError: If key or value is not a string, or can't be written as utf-8
    """
    if not isinstance(kv.key, str):
        raise ValueError(f"key must be str, got {type(kv.key).__name__}")
    if not isinstance(kv.value, str):
        raise ValueError(f"value must be str, got {type(kv.value).__name__}")
    _check_utf8('key', kv.key)
    _check_utf8('value', kv.value)
    return json.dumps({'key': kv.key, 'value': kv.value}, ensure_ascii=False) + '\n'

