"""
Descriptor codecs: BMFont JSON and BMFont text (.fnt).

JSON layout follows https://github.com/Jam3/load-bmfont/blob/master/json-spec.md:

    {
      "pages": ["name.tga"],
      "chars": [{"id": 65, "x": 1, "y": 1, "width": 9, ...}, ...],
      "info": {"face": "Name", "size": 20, ...},
      "common": {"lineHeight": 23, "base": 18, "scaleW": 512, "scaleH": 512, ...},
      "kernings": []
    }

Unknown keys are ignored; missing required numeric fields raise MalformedDescriptor.
"""

from __future__ import annotations

import json
import shlex
from typing import Dict, List

from glyphbake.descriptor.model import FontDescriptor, GlyphMetrics
from glyphbake.errors import MalformedDescriptor


# BMFont channel bitfield, all channels hold the glyph
CHANNEL_ALL = 15

_CHAR_FIELDS = ("x", "y", "width", "height", "xoffset", "yoffset", "xadvance")


def _require(block: dict, key: str, where: str):
    if key not in block:
        raise MalformedDescriptor(f"<{where}> is missing required field '{key}'")
    return block[key]


def _require_int(block: dict, key: str, where: str) -> int:
    value = _require(block, key, where)
    if isinstance(value, bool):
        raise MalformedDescriptor(f"<{where}> field '{key}' must be a number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise MalformedDescriptor(f"<{where}> field '{key}' must be an integer, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise MalformedDescriptor(f"<{where}> field '{key}' must be an integer, got {value!r}") from exc


def _require_float(block: dict, key: str, where: str) -> float:
    value = _require(block, key, where)
    if isinstance(value, bool):
        raise MalformedDescriptor(f"<{where}> field '{key}' must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedDescriptor(f"<{where}> field '{key}' must be a number, got {value!r}") from exc


def _parse_char(record: dict) -> tuple[int, GlyphMetrics]:
    if not isinstance(record, dict):
        raise MalformedDescriptor(f"<char> record must be an object, got {type(record).__name__}")
    codepoint = _require_int(record, "id", "char")
    where = f"char id={codepoint}"
    values = {name: _require_int(record, name, where) for name in _CHAR_FIELDS}
    page = _require_int(record, "page", where) if "page" in record else 0
    if page != 0:
        raise MalformedDescriptor(f"<{where}> references page {page}, only page 0 is supported")
    if values["width"] < 0 or values["height"] < 0:
        raise MalformedDescriptor(f"<{where}> has negative size")
    return codepoint, GlyphMetrics(**values)


def _build(info: dict, common: dict, pages: List[str], chars: list) -> FontDescriptor:
    if not isinstance(info, dict) or not isinstance(common, dict):
        raise MalformedDescriptor("<info> and <common> must be objects")
    if len(pages) != 1:
        raise MalformedDescriptor(f"Expected exactly one page, got {len(pages)}")

    glyphs: Dict[int, GlyphMetrics] = {}
    for record in chars:
        codepoint, metrics = _parse_char(record)
        if codepoint in glyphs:
            raise MalformedDescriptor(f"Duplicate <char> id={codepoint}")
        glyphs[codepoint] = metrics

    padding = info.get("padding", 0)
    if isinstance(padding, str):
        padding = padding.split(",")
    if isinstance(padding, (list, tuple)):
        padding = padding[0] if padding else 0
    try:
        padding = int(padding)
    except (TypeError, ValueError):
        padding = 0

    return FontDescriptor(
        face=str(_require(info, "face", "info")),
        size=_require_float(info, "size", "info"),
        atlas_width=_require_int(common, "scaleW", "common"),
        atlas_height=_require_int(common, "scaleH", "common"),
        line_height=_require_int(common, "lineHeight", "common"),
        base=_require_int(common, "base", "common"),
        glyphs=glyphs,
        page_file=str(pages[0]),
        padding=padding,
    )


def _info_block(descriptor: FontDescriptor) -> dict:
    size = descriptor.size
    if float(size).is_integer():
        size = int(size)
    pad = descriptor.padding
    return {
        "face": descriptor.face,
        "size": size,
        "bold": 0,
        "italic": 0,
        "charset": "",
        "unicode": 1,
        "stretchH": 100,
        "smooth": 0,
        "aa": 1,
        "padding": [pad, pad, pad, pad],
        "spacing": [0, 0],
    }


def _common_block(descriptor: FontDescriptor) -> dict:
    return {
        "lineHeight": descriptor.line_height,
        "base": descriptor.base,
        "scaleW": descriptor.atlas_width,
        "scaleH": descriptor.atlas_height,
        "pages": 1,
        "packed": 0,
    }


def _char_records(descriptor: FontDescriptor) -> List[dict]:
    records = []
    for codepoint, g in descriptor.glyphs.items():
        records.append({
            "id": codepoint,
            "x": g.x,
            "y": g.y,
            "width": g.width,
            "height": g.height,
            "xoffset": g.xoffset,
            "yoffset": g.yoffset,
            "xadvance": g.xadvance,
            "page": 0,
            "chnl": CHANNEL_ALL,
        })
    return records


# --- JSON ---


def parse_json(text: str) -> FontDescriptor:
    """Parse a BMFont JSON descriptor."""
    try:
        tree = json.loads(text)
    except ValueError as exc:
        raise MalformedDescriptor(f"Descriptor is not valid JSON: {exc}") from exc
    if not isinstance(tree, dict):
        raise MalformedDescriptor("Descriptor root must be an object")
    for tag in ("info", "common", "pages", "chars"):
        if tag not in tree:
            raise MalformedDescriptor(f"Not a valid BMFont JSON file: no <{tag}> key found.")
    if not isinstance(tree["pages"], list) or not isinstance(tree["chars"], list):
        raise MalformedDescriptor("<pages> and <chars> must be arrays")
    return _build(tree["info"], tree["common"], tree["pages"], tree["chars"])


def serialize_json(descriptor: FontDescriptor, indent: int | None = 2) -> str:
    """Write a BMFont JSON descriptor."""
    tree = {
        "pages": [descriptor.page_file],
        "chars": _char_records(descriptor),
        "info": _info_block(descriptor),
        "common": _common_block(descriptor),
        "kernings": [],
    }
    return json.dumps(tree, indent=indent, ensure_ascii=False)


# --- Text (.fnt) ---


def _parse_text_dict(line: str) -> dict:
    """Parse space separated key=value pairs."""
    try:
        items = shlex.split(line)
    except ValueError as exc:
        raise MalformedDescriptor(f"Unbalanced quotes in line: {line!r}") from exc
    result = {}
    for item in items:
        if "=" not in item:
            continue
        key, value = item.split("=", 1)
        result[key] = value
    return result


def parse_text(text: str) -> FontDescriptor:
    """Parse a BMFont text (.fnt) descriptor."""
    info = None
    common = None
    pages: List[str] = []
    chars: List[dict] = []

    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        tag, _, rest = line.partition(" ")
        if tag == "info":
            info = _parse_text_dict(rest)
        elif tag == "common":
            common = _parse_text_dict(rest)
        elif tag == "page":
            page = _parse_text_dict(rest)
            pages.append(_require(page, "file", "page"))
        elif tag == "char":
            chars.append(_parse_text_dict(rest))

    if info is None:
        raise MalformedDescriptor("Not a valid BMFont text file: no <info> line found.")
    if common is None:
        raise MalformedDescriptor("Not a valid BMFont text file: no <common> line found.")
    return _build(info, common, pages, chars)


def _to_str(value) -> str:
    if isinstance(value, str):
        # The text layout has no escape sequences
        if any(ch in value for ch in "\"\\\r\n"):
            raise ValueError(f"Cannot write {value!r} to a BMFont text descriptor")
        return '"' + value + '"'
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def _text_line(tag: str, block: dict) -> str:
    return " ".join([tag] + [f"{key}={_to_str(value)}" for key, value in block.items()])


def serialize_text(descriptor: FontDescriptor) -> str:
    """
    Write a BMFont text (.fnt) descriptor.

    Raises:
        ValueError: face or page file contains a double quote, backslash or line break.
    """
    lines = [
        _text_line("info", _info_block(descriptor)),
        _text_line("common", _common_block(descriptor)),
        _text_line("page", {"id": 0, "file": descriptor.page_file}),
        f"chars count={len(descriptor.glyphs)}",
    ]
    lines.extend(_text_line("char", record) for record in _char_records(descriptor))
    return "\n".join(lines) + "\n"


# --- Dispatch ---


def parse(text: str) -> FontDescriptor:
    """Parse a descriptor, detecting JSON or text layout from its first character."""
    if text.lstrip().startswith("{"):
        return parse_json(text)
    return parse_text(text)


def serialize(descriptor: FontDescriptor, fmt: str = "json") -> str:
    """Serialize descriptor in "json" or "fnt" layout."""
    if fmt == "json":
        return serialize_json(descriptor)
    if fmt in ("fnt", "text"):
        return serialize_text(descriptor)
    raise ValueError(f"Unknown descriptor format: {fmt!r}")


__all__ = [
    "parse",
    "serialize",
    "parse_json",
    "serialize_json",
    "parse_text",
    "serialize_text",
    "CHANNEL_ALL",
]
