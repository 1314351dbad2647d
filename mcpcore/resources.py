"""Resource descriptions, resource contents and URI templates."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Union
from urllib.parse import quote

from mcpcore.types import Annotations, to_jsonable


@dataclass
class TextResourceContents:
    """Text contents of a resource."""

    uri: str
    text: str
    mime_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"uri": self.uri}
        if self.mime_type:
            result["mimeType"] = self.mime_type
        result["text"] = self.text
        return result


@dataclass
class BlobResourceContents:
    """Binary contents of a resource, base64 encoded."""

    uri: str
    blob: str
    mime_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"uri": self.uri}
        if self.mime_type:
            result["mimeType"] = self.mime_type
        result["blob"] = self.blob
        return result


ResourceContents = Union[TextResourceContents, BlobResourceContents]


@dataclass(frozen=True)
class _Operator:
    first: str
    sep: str
    named: bool
    ifemp: str
    allow_reserved: bool


_OPERATORS = {
    "": _Operator("", ",", False, "", False),
    "+": _Operator("", ",", False, "", True),
    "#": _Operator("#", ",", False, "", True),
    ".": _Operator(".", ".", False, "", False),
    "/": _Operator("/", "/", False, "", False),
    ";": _Operator(";", ";", True, "", False),
    "?": _Operator("?", "&", True, "=", False),
    "&": _Operator("&", "&", True, "=", False),
}
_RESERVED_OPERATORS = "=,!@|"
_VARCHAR = r"(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2})"
_VARNAME_RE = re.compile(rf"{_VARCHAR}(?:\.?{_VARCHAR})*")
_PREFIX_RE = re.compile(r"[1-9][0-9]{0,3}")
_PCT_RE = re.compile(r"%[0-9A-Fa-f]{2}")
_UNRESERVED = "-._~"
_RESERVED = ":/?#[]@!$&'()*+,;="


@dataclass(frozen=True)
class _VarSpec:
    name: str
    prefix: int | None
    explode: bool


@dataclass(frozen=True)
class _Expression:
    operator: _Operator
    varspecs: tuple[_VarSpec, ...]


def _parse_varspec(text: str, template: str) -> _VarSpec:
    explode = False
    prefix = None
    name = text
    if text.endswith("*"):
        explode = True
        name = text[:-1]
    elif ":" in text:
        name, _, digits = text.partition(":")
        if not _PREFIX_RE.fullmatch(digits):
            raise ValueError(f"invalid prefix {digits!r} in URI template {template!r}")
        prefix = int(digits)
    if not _VARNAME_RE.fullmatch(name):
        raise ValueError(f"invalid variable name {name!r} in URI template {template!r}")
    return _VarSpec(name, prefix, explode)


def _parse_expression(body: str, template: str) -> _Expression:
    if not body:
        raise ValueError(f"empty expression in URI template {template!r}")
    if body[0] in _RESERVED_OPERATORS:
        raise ValueError(f"unsupported operator {body[0]!r} in URI template {template!r}")
    op_char = body[0] if body[0] in _OPERATORS and body[0] else ""
    rest = body[len(op_char):]
    specs = tuple(_parse_varspec(spec, template) for spec in rest.split(","))
    return _Expression(_OPERATORS[op_char], specs)


def _parse_template(template: str) -> list[str | _Expression]:
    parts: list[str | _Expression] = []
    pos = 0
    while pos < len(template):
        start = template.find("{", pos)
        stray = template.find("}", pos)
        if stray != -1 and (start == -1 or stray < start):
            raise ValueError(f"unmatched '}}' in URI template {template!r}")
        if start == -1:
            parts.append(template[pos:])
            break
        if start > pos:
            parts.append(template[pos:start])
        end = template.find("}", start + 1)
        if end == -1:
            raise ValueError(f"unclosed expression in URI template {template!r}")
        parts.append(_parse_expression(template[start + 1:end], template))
        pos = end + 1
    return parts


def _encode(value: str, allow_reserved: bool) -> str:
    if not allow_reserved:
        return quote(value, safe=_UNRESERVED)
    safe = _UNRESERVED + _RESERVED
    pieces = []
    pos = 0
    for match in _PCT_RE.finditer(value):
        pieces.append(quote(value[pos:match.start()], safe=safe))
        pieces.append(match.group())
        pos = match.end()
    pieces.append(quote(value[pos:], safe=safe))
    return "".join(pieces)


def _expand_var(op: _Operator, spec: _VarSpec, value: Any) -> str | None:
    if value is None:
        return None

    def enc(text: str) -> str:
        return _encode(text, op.allow_reserved)

    if isinstance(value, Mapping):
        pairs = [(str(k), str(v)) for k, v in value.items() if v is not None]
        if not pairs:
            return None
        if spec.prefix is not None:
            raise ValueError(f"prefix modifier cannot be applied to composite value {spec.name!r}")
        if spec.explode:
            return op.sep.join(
                enc(k) + (op.ifemp if op.named and v == "" else "=" + enc(v)) for k, v in pairs
            )
        joined = ",".join(f"{enc(k)},{enc(v)}" for k, v in pairs)
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value if v is not None]
        if not items:
            return None
        if spec.prefix is not None:
            raise ValueError(f"prefix modifier cannot be applied to composite value {spec.name!r}")
        if spec.explode:
            if op.named:
                return op.sep.join(
                    spec.name + (op.ifemp if item == "" else "=" + enc(item)) for item in items
                )
            return op.sep.join(enc(item) for item in items)
        joined = ",".join(enc(item) for item in items)
    else:
        text = str(value)
        if spec.prefix is not None:
            text = text[:spec.prefix]
        if op.named:
            return spec.name + (op.ifemp if text == "" else "=" + enc(text))
        return enc(text)

    if op.named:
        return spec.name + (op.ifemp if joined == "" else "=" + joined)
    return joined


class URITemplate:
    """An RFC 6570 URI template, validated when created."""

    __slots__ = ("_raw", "_parts")

    def __init__(self, template: str) -> None:
        if not isinstance(template, str):
            raise TypeError(f"URI template must be a string, got {type(template).__name__}")
        self._raw = template
        self._parts = _parse_template(template)

    @property
    def raw(self) -> str:
        """The template text as given."""
        return self._raw

    def _expressions(self) -> Iterator[_Expression]:
        return (part for part in self._parts if isinstance(part, _Expression))

    @property
    def variable_names(self) -> tuple[str, ...]:
        """Names of the template's variables, in order of first appearance."""
        names = dict.fromkeys(spec.name for expr in self._expressions() for spec in expr.varspecs)
        return tuple(names)

    def expand(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> str:
        """Fill in the template with the given variable values."""
        merged = {**(values or {}), **kwargs}
        out = []
        for part in self._parts:
            if isinstance(part, str):
                out.append(part)
                continue
            pieces = [
                piece
                for spec in part.varspecs
                if (piece := _expand_var(part.operator, spec, merged.get(spec.name))) is not None
            ]
            if pieces:
                out.append(part.operator.first + part.operator.sep.join(pieces))
        return "".join(out)

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"URITemplate({self._raw!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URITemplate):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)


@dataclass
class Resource:
    """A known resource that the server can read."""

    name: str
    uri: str
    description: str = ""
    mime_type: str = ""
    size: int = 0
    annotations: Annotations | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "uri": self.uri}
        if self.description:
            result["description"] = self.description
        if self.mime_type:
            result["mimeType"] = self.mime_type
        if self.size:
            result["size"] = self.size
        if self.annotations is not None:
            result["annotations"] = self.annotations.to_dict()
        return result


@dataclass
class ResourceTemplate:
    """A parameterised family of resources described by a URI template."""

    name: str
    uri_template: URITemplate | None
    description: str = ""
    mime_type: str = ""
    annotations: Annotations | None = None

    def __post_init__(self) -> None:
        if isinstance(self.uri_template, str):
            self.uri_template = URITemplate(self.uri_template)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "uriTemplate": self.uri_template.raw if self.uri_template is not None else None,
        }
        if self.description:
            result["description"] = self.description
        if self.mime_type:
            result["mimeType"] = self.mime_type
        if self.annotations is not None:
            result["annotations"] = self.annotations.to_dict()
        return result


@dataclass
class ReadResourceRequest:
    """A request to read a resource."""

    uri: str
    arguments: dict[str, Any] | None = None


@dataclass
class ReadResourceResult:
    """The contents returned for a read request."""

    contents: list[ResourceContents] = field(default_factory=list)
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"contents": to_jsonable(self.contents)}
        if self.meta:
            result["_meta"] = to_jsonable(self.meta)
        return result


@dataclass
class ListResourcesResult:
    """The resources returned for a list request."""

    resources: list[Resource] = field(default_factory=list)
    next_cursor: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"resources": [r.to_dict() for r in self.resources]}
        if self.next_cursor:
            result["nextCursor"] = self.next_cursor
        if self.meta:
            result["_meta"] = to_jsonable(self.meta)
        return result


def new_resource_template(
    uri_template: str,
    name: str,
    *,
    description: str = "",
    mime_type: str = "",
    annotations: Annotations | None = None,
) -> ResourceTemplate:
    """Create a resource template; raises ValueError if the template is malformed."""
    return ResourceTemplate(
        name=name,
        uri_template=URITemplate(uri_template),
        description=description,
        mime_type=mime_type,
        annotations=annotations,
    )