"""Tool definitions, input-schema builders and tool call results."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from mcpcore.errors import ContentParseError
from mcpcore.resources import BlobResourceContents, ResourceContents, TextResourceContents
from mcpcore.types import (
    Content,
    new_embedded_resource,
    new_image_content,
    new_text_content,
    to_jsonable,
)

METHOD_TOOLS_CALL = "tools/call"

Schema = dict[str, Any]
PropertyOption = Callable[[Schema], None]


def _empty_object_schema() -> Schema:
    return {"type": "object", "properties": {}, "required": []}


def _clean_schema(schema: Any) -> Any:
    """Drop empty ``required``/``properties`` entries, recursing into sub-schemas."""
    if not isinstance(schema, Mapping):
        return to_jsonable(schema)
    result: dict[str, Any] = {}
    for key, value in schema.items():
        if key in ("required", "properties") and not value:
            continue
        if key == "properties" and isinstance(value, Mapping):
            result[key] = {name: _clean_schema(sub) for name, sub in value.items()}
        elif key == "items":
            result[key] = _clean_schema(value)
        else:
            result[key] = to_jsonable(value)
    return result


@dataclass
class Tool:
    """An MCP tool: its name, description and JSON input schema."""

    name: str
    description: str = ""
    input_schema: Schema = field(default_factory=_empty_object_schema)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        result["inputSchema"] = _clean_schema(self.input_schema)
        return result


ToolOption = Callable[[Tool], None]


@dataclass
class CallToolParams:
    """Parameters of a tool call."""

    name: str
    arguments: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


@dataclass
class CallToolRequest:
    """A tool call request handed to a tool handler."""

    params: CallToolParams
    method: str = METHOD_TOOLS_CALL


@dataclass
class CallToolResult:
    """The outcome of a tool call."""

    content: list[Content] = field(default_factory=list)
    is_error: bool = False
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.meta:
            result["_meta"] = to_jsonable(self.meta)
        result["content"] = to_jsonable(self.content)
        if self.is_error:
            result["isError"] = True
        return result


@dataclass
class ListToolsResult:
    """The tools returned for a list request."""

    tools: list[Tool] = field(default_factory=list)
    next_cursor: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.meta:
            result["_meta"] = to_jsonable(self.meta)
        if self.next_cursor:
            result["nextCursor"] = self.next_cursor
        result["tools"] = [tool.to_dict() for tool in self.tools]
        return result


def new_tool(name: str, *options: ToolOption) -> Tool:
    """Create a tool with an empty object input schema, then apply the options."""
    tool = Tool(name=name)
    for option in options:
        option(tool)
    return tool


def with_description(text: str) -> ToolOption:
    """Set the tool's description."""

    def apply(tool: Tool) -> None:
        tool.description = text

    return apply


def _with_property(
    kind: str, name: str, options: tuple[PropertyOption, ...], **extra: Any
) -> ToolOption:
    def apply(tool: Tool) -> None:
        schema: Schema = {"type": kind, **extra}
        for option in options:
            option(schema)
        marked = schema.get("required")
        if marked == ["true"]:
            del schema["required"]
        tool.input_schema.setdefault("properties", {})[name] = schema
        if marked:
            tool.input_schema.setdefault("required", []).append(name)

    return apply


def with_string(name: str, *options: PropertyOption) -> ToolOption:
    """Add a string parameter to the input schema."""
    return _with_property("string", name, options)


def with_number(name: str, *options: PropertyOption) -> ToolOption:
    """Add a number parameter to the input schema."""
    return _with_property("number", name, options)


def with_integer(name: str, *options: PropertyOption) -> ToolOption:
    """Add an integer parameter to the input schema."""
    return _with_property("integer", name, options)


def with_boolean(name: str, *options: PropertyOption) -> ToolOption:
    """Add a boolean parameter to the input schema."""
    return _with_property("boolean", name, options)


def with_object(name: str, *options: PropertyOption) -> ToolOption:
    """Add an object parameter to the input schema."""
    return _with_property("object", name, options, properties={})


def with_array(name: str, *options: PropertyOption) -> ToolOption:
    """Add an array parameter to the input schema."""
    return _with_property("array", name, options)


def description(text: str) -> PropertyOption:
    """Describe a parameter."""

    def apply(schema: Schema) -> None:
        schema["description"] = text

    return apply


def required() -> PropertyOption:
    """Mark a parameter as required."""

    def apply(schema: Schema) -> None:
        schema["required"] = ["true"]

    return apply


def default(value: Any) -> PropertyOption:
    """Give a parameter a default value."""

    def apply(schema: Schema) -> None:
        if value is None:
            schema.pop("default", None)
        else:
            schema["default"] = value

    return apply


def title(text: str) -> PropertyOption:
    """Give a parameter a title."""

    def apply(schema: Schema) -> None:
        schema["title"] = text

    return apply


def enum(*values: str) -> PropertyOption:
    """Restrict a parameter to the given values."""

    def apply(schema: Schema) -> None:
        schema["enum"] = list(values)

    return apply


def properties(props: Mapping[str, Schema]) -> PropertyOption:
    """Set the properties of an object parameter."""

    def apply(schema: Schema) -> None:
        schema["properties"] = copy.deepcopy(dict(props))

    return apply


def items(item_schema: Schema) -> PropertyOption:
    """Set the schema of an array parameter's items."""

    def apply(schema: Schema) -> None:
        schema["items"] = copy.deepcopy(item_schema)

    return apply


def min_items(count: int) -> PropertyOption:
    """Set the minimum number of items of an array parameter."""
    if count < 0:
        raise ValueError("min_items count cannot be negative")

    def apply(schema: Schema) -> None:
        if count:
            schema["minItems"] = count
        else:
            schema.pop("minItems", None)

    return apply


def max_items(count: int) -> PropertyOption:
    """Set the maximum number of items of an array parameter."""
    if count < 0:
        raise ValueError("max_items count cannot be negative")

    def apply(schema: Schema) -> None:
        schema["maxItems"] = count

    return apply


def unique_items(unique: bool) -> PropertyOption:
    """Set whether an array parameter's items must be unique."""

    def apply(schema: Schema) -> None:
        if unique:
            schema["uniqueItems"] = True
        else:
            schema.pop("uniqueItems", None)

    return apply


def new_text_result(text: str) -> CallToolResult:
    """Create a successful result holding one piece of text."""
    return CallToolResult(content=[new_text_content(text)])


def new_error_result(text: str) -> CallToolResult:
    """Create an error result holding one piece of text."""
    return CallToolResult(content=[new_text_content(text)], is_error=True)


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def parse_call_tool_result(raw: str | bytes | Mapping[str, Any]) -> CallToolResult:
    """Decode a tool call result from JSON text or an already decoded object."""
    if isinstance(raw, Mapping):
        data: Any = raw
    else:
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise ContentParseError(f"failed to unmarshal response: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ContentParseError("failed to unmarshal response: result is not an object")

    result = CallToolResult()
    meta = data.get("_meta")
    if isinstance(meta, Mapping):
        result.meta = dict(meta)
    is_error = data.get("isError")
    if isinstance(is_error, bool):
        result.is_error = is_error

    if "content" not in data:
        raise ContentParseError("content is missing")
    contents = data["content"]
    if not isinstance(contents, list):
        raise ContentParseError("content is not an array")
    for item in contents:
        if not isinstance(item, Mapping):
            raise ContentParseError("content is not an object")
        result.content.append(parse_content(item))
    return result


def parse_content(content_map: Mapping[str, Any]) -> Content:
    """Decode one content item by its ``type`` field."""
    content_type = _string(content_map, "type")
    if content_type == "text":
        text = _string(content_map, "text")
        if not text:
            raise ContentParseError("text is missing")
        return new_text_content(text)
    if content_type == "image":
        data = _string(content_map, "data")
        mime_type = _string(content_map, "mimeType")
        if not data or not mime_type:
            raise ContentParseError("image data or mimeType is missing")
        return new_image_content(data, mime_type)
    if content_type == "resource":
        resource = content_map.get("resource")
        if not isinstance(resource, Mapping):
            raise ContentParseError("resource is missing")
        return new_embedded_resource(parse_resource_contents(resource))
    raise ContentParseError(f"unsupported content type: {content_type}")


def parse_resource_contents(content_map: Mapping[str, Any]) -> ResourceContents:
    """Decode text or blob resource contents."""
    uri = _string(content_map, "uri")
    if not uri:
        raise ContentParseError("resource uri is missing")
    mime_type = _string(content_map, "mimeType")
    text = _string(content_map, "text")
    if text:
        return TextResourceContents(uri=uri, text=text, mime_type=mime_type)
    blob = _string(content_map, "blob")
    if blob:
        return BlobResourceContents(uri=uri, blob=blob, mime_type=mime_type)
    raise ContentParseError("unsupported resource type")