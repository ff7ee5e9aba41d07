from __future__ import annotations

import json
import logging
from typing import Any

from lyricistant.errors import HeaderParseError

from .model import FILE_KIND, Header, ReferenceData

logger = logging.getLogger(__name__)

# On-disk field names; existing .lyrics files depend on them.
_MARKER_FIELD = "lyrics"
_REFERENCE_FIELD = "referencedData"
_KIND_FIELD = "dataType"
_LOCATOR_FIELD = "data"


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def _loads(line: str) -> Any:
    return json.loads(line, parse_constant=_reject_constant)


def is_header_like(line: str) -> bool:
    """
    True for any syntactically valid JSON text, whatever its shape.

    Callers narrow this down further by file extension.
    """
    try:
        _loads(line)
    except ValueError:
        return False
    return True


def _header_to_json(header: Header) -> dict[str, Any]:
    ref = header.referenced_data
    return {
        _MARKER_FIELD: header.is_document_marker,
        _REFERENCE_FIELD: None if ref is None else {_KIND_FIELD: ref.kind, _LOCATOR_FIELD: ref.locator},
    }


def encode_header(header: Header) -> str:
    # minified, one line, exactly one trailing newline
    return json.dumps(_header_to_json(header), separators=(",", ":"), ensure_ascii=False) + "\n"


def encode_file_reference(locator: str) -> str:
    return encode_header(Header(referenced_data=ReferenceData(kind=FILE_KIND, locator=locator)))


def _parse_header(line: str) -> Header:
    try:
        data = _loads(line)
    except ValueError as e:
        raise HeaderParseError(line, "not_json") from e

    if not isinstance(data, dict):
        raise HeaderParseError(line, "bad_shape")

    raw = data.get(_REFERENCE_FIELD)
    if raw is None:
        return Header(referenced_data=None)
    if not isinstance(raw, dict):
        raise HeaderParseError(line, "bad_shape")

    kind = raw.get(_KIND_FIELD)
    locator = raw.get(_LOCATOR_FIELD)
    if not isinstance(kind, str) or not isinstance(locator, str):
        raise HeaderParseError(line, "bad_shape")
    return Header(referenced_data=ReferenceData(kind=kind, locator=locator))


def decode_reference_data(line: str) -> ReferenceData | None:
    """
    Decode the reference carried by a header line.

    Raises HeaderParseError if the line is not JSON at all. JSON of any other
    shape is accepted and simply carries no reference.
    """
    try:
        return _parse_header(line).referenced_data
    except HeaderParseError as e:
        if e.reason == "not_json":
            raise
        logger.debug("Header line has unexpected shape, ignoring reference: %r", line)
        return None
