"""
Body encoding and decoding for the Plex wire formats.

Plex speaks JSON and XML; a raw text passthrough covers everything else.
Structured bodies are limited to MAX_SERIALIZATION_DEPTH levels of nesting in
both directions.

XML mapping used in both directions:
    - scalar values of a mapping become attributes
    - nested mappings become child elements named after their key
    - lists become repeated child elements named after their key
    - an element with only text decodes to that text
"""

import json
import xml.etree.ElementTree as ET
from typing import Any, Dict

from common.constants import (
    ACCEPT_HEADERS,
    CONTENT_TYPE_HEADERS,
    FORMAT_JSON,
    FORMAT_RAW,
    FORMAT_XML,
    MAX_SERIALIZATION_DEPTH,
)

from .errors import DecodeError, EncodeError, InvalidArgumentError

XML_ROOT_TAG = "MediaContainer"

_FORMATS = {name.lower(): name for name in (FORMAT_JSON, FORMAT_XML, FORMAT_RAW)}


def normalize_format(data_format: str) -> str:
    """Return the canonical format name for ``data_format`` (case-insensitive)."""
    try:
        return _FORMATS[str(data_format).lower()]
    except KeyError:
        raise InvalidArgumentError(
            f"Unsupported data format: {data_format!r}. Expected one of {sorted(_FORMATS.values())}"
        )


def accept_header(data_format: str) -> str:
    return ACCEPT_HEADERS[normalize_format(data_format)]


def content_type_header(data_format: str) -> str:
    return CONTENT_TYPE_HEADERS[normalize_format(data_format)]


def nesting_depth(value: Any) -> int:
    """Nesting depth of mappings and lists; scalars have depth 0."""
    depth = 0
    stack = [(value, 0)]
    while stack:
        current, level = stack.pop()
        if isinstance(current, dict):
            children = current.values()
        elif isinstance(current, (list, tuple)):
            children = current
        else:
            continue
        depth = max(depth, level + 1)
        stack.extend((child, level + 1) for child in children)
    return depth


def _element_depth(element: ET.Element) -> int:
    depth = 0
    stack = [(element, 1)]
    while stack:
        current, level = stack.pop()
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in current)
    return depth


### Encoding ###
def encode_body(body: Any, data_format: str, max_depth: int = MAX_SERIALIZATION_DEPTH) -> str:
    """
    Serialize a request body.

    Raises:
        EncodeError: If the body is nested deeper than ``max_depth`` or cannot
            be represented in the requested format
    """
    data_format = normalize_format(data_format)

    if data_format == FORMAT_RAW:
        return body if isinstance(body, str) else str(body)

    if isinstance(body, str):
        # Already serialized by the caller
        return body

    depth = nesting_depth(body)
    if depth > max_depth:
        raise EncodeError(
            f"Request body is nested {depth} levels deep; the limit is {max_depth}",
            details={"depth": depth, "max_depth": max_depth},
        )

    if data_format == FORMAT_JSON:
        try:
            return json.dumps(body)
        except (TypeError, ValueError) as e:
            raise EncodeError("Request body is not JSON serializable", cause=e)

    return _encode_xml(body)


def _encode_xml(body: Any) -> str:
    if not isinstance(body, dict):
        raise EncodeError(f"XML request bodies must be mappings, got {type(body).__name__}")

    if len(body) == 1:
        tag, value = next(iter(body.items()))
        if isinstance(value, dict):
            root = _build_element(tag, value)
            return ET.tostring(root, encoding="unicode")

    root = _build_element(XML_ROOT_TAG, body)
    return ET.tostring(root, encoding="unicode")


def _build_element(tag: str, value: Any) -> ET.Element:
    element = ET.Element(str(tag))
    if isinstance(value, dict):
        _populate_element(element, value)
    elif value is not None:
        element.text = _xml_scalar(value)
    return element


def _populate_element(element: ET.Element, mapping: Dict[str, Any]) -> None:
    for key, value in mapping.items():
        if isinstance(value, dict):
            element.append(_build_element(key, value))
        elif isinstance(value, (list, tuple)):
            for item in value:
                element.append(_build_element(key, item))
        elif value is not None:
            element.set(str(key), _xml_scalar(value))


def _xml_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


### Decoding ###
def decode_body(text: str, data_format: str, max_depth: int = MAX_SERIALIZATION_DEPTH) -> Any:
    """
    Parse a response body.

    Empty bodies decode to None for the structured formats.

    Raises:
        DecodeError: If the text is not valid for the format or is nested
            deeper than ``max_depth``
    """
    data_format = normalize_format(data_format)

    if data_format == FORMAT_RAW:
        return text

    if text is None or not text.strip():
        return None

    if data_format == FORMAT_JSON:
        try:
            data = json.loads(text)
        except RecursionError as e:
            # The JSON scanner recurses per nesting level
            raise DecodeError(f"Response body is nested deeper than {max_depth} levels", cause=e)
        except ValueError as e:
            raise DecodeError("Response body is not valid JSON", cause=e)
        _check_depth(nesting_depth(data), max_depth)
        return data

    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise DecodeError("Response body is not valid XML", cause=e)
    # Measured before conversion, which recurses per element
    _check_depth(_element_depth(root), max_depth)
    return {root.tag: _element_to_value(root)}


def _check_depth(depth: int, max_depth: int) -> None:
    if depth > max_depth:
        raise DecodeError(
            f"Response body is nested {depth} levels deep; the limit is {max_depth}",
            details={"depth": depth, "max_depth": max_depth},
        )


def _element_to_value(element: ET.Element) -> Any:
    children = list(element)
    text = (element.text or "").strip()

    if not children and not element.attrib and text:
        return text

    result: Dict[str, Any] = dict(element.attrib)
    for child in children:
        grouped = result.get(child.tag)
        if not isinstance(grouped, list):
            # An attribute with the same name as a child tag joins the list
            grouped = [] if grouped is None else [grouped]
            result[child.tag] = grouped
        grouped.append(_element_to_value(child))

    return result
