import json

import pytest

from mcpcore.errors import ContentParseError, McpError
from mcpcore.resources import BlobResourceContents, TextResourceContents
from mcpcore.tools import (
    CallToolResult,
    ListToolsResult,
    default,
    description,
    enum,
    items,
    max_items,
    min_items,
    new_error_result,
    new_text_result,
    new_tool,
    parse_call_tool_result,
    parse_content,
    parse_resource_contents,
    properties,
    required,
    title,
    unique_items,
    with_array,
    with_boolean,
    with_description,
    with_integer,
    with_number,
    with_object,
    with_string,
)
from mcpcore.types import EmbeddedResource, ImageContent, TextContent


def test_new_tool_has_empty_object_schema():
    tool = new_tool("tool2", with_description("Tool 2"))
    assert tool.name == "tool2"
    assert tool.description == "Tool 2"
    assert tool.input_schema["type"] == "object"
    assert tool.input_schema["properties"] == {}
    assert tool.input_schema["required"] == []


def test_property_types():
    tool = new_tool(
        "t",
        with_string("s"),
        with_number("n"),
        with_integer("i"),
        with_boolean("b"),
        with_object("o"),
        with_array("a"),
    )
    kinds = {name: schema["type"] for name, schema in tool.input_schema["properties"].items()}
    assert kinds == {
        "s": "string",
        "n": "number",
        "i": "integer",
        "b": "boolean",
        "o": "object",
        "a": "array",
    }


def test_required_marks_parameter():
    tool = new_tool("t", with_string("a", required()), with_number("b"), with_boolean("c", required()))
    assert tool.input_schema["required"] == ["a", "c"]
    assert "required" not in tool.input_schema["properties"]["a"]


def test_property_options_apply():
    tool = new_tool(
        "t",
        with_string("mode", description("The mode"), title("Mode"), default("fast"), enum("fast", "slow")),
    )
    schema = tool.input_schema["properties"]["mode"]
    assert schema["description"] == "The mode"
    assert schema["title"] == "Mode"
    assert schema["default"] == "fast"
    assert schema["enum"] == ["fast", "slow"]


def test_array_options():
    tool = new_tool(
        "t",
        with_array("tags", items({"type": "string"}), min_items(1), max_items(5), unique_items(True)),
    )
    schema = tool.input_schema["properties"]["tags"]
    assert schema["items"] == {"type": "string"}
    assert schema["minItems"] == 1
    assert schema["maxItems"] == 5
    assert schema["uniqueItems"] is True


def test_object_properties_option():
    props = {"inner": {"type": "string"}}
    tool = new_tool("t", with_object("obj", properties(props)))
    assert tool.input_schema["properties"]["obj"]["properties"] == props


def test_tool_to_dict_omits_empty_schema_parts():
    tool = new_tool("t")
    assert tool.to_dict() == {"name": "t", "inputSchema": {"type": "object"}}


def test_tool_to_dict_includes_required():
    tool = new_tool("t", with_description("d"), with_string("q", required()))
    data = tool.to_dict()
    assert data["description"] == "d"
    assert data["inputSchema"]["required"] == ["q"]
    assert data["inputSchema"]["properties"]["q"] == {"type": "string"}


def test_new_text_result():
    result = new_text_result("Mock tool execution result")
    assert result.is_error is False
    assert result.content == [TextContent(text="Mock tool execution result")]
    assert result.content[0].type == "text"


def test_new_error_result():
    result = new_error_result("boom")
    assert result.is_error is True
    assert result.to_dict() == {"content": [{"type": "text", "text": "boom"}], "isError": True}


def test_call_tool_result_round_trip():
    original = new_error_result("failure")
    original.meta = {"k": "v"}
    parsed = parse_call_tool_result(json.dumps(original.to_dict()))
    assert parsed == original


def test_parse_call_tool_result_from_bytes_and_mapping():
    payload = {"content": [{"type": "image", "data": "abc", "mimeType": "image/png"}]}
    from_bytes = parse_call_tool_result(json.dumps(payload).encode())
    from_map = parse_call_tool_result(payload)
    assert from_bytes == from_map
    assert from_map.content == [ImageContent(data="abc", mime_type="image/png")]


@pytest.mark.parametrize(
    "raw, message",
    [
        ("{}", "content is missing"),
        ('{"content": 1}', "content is not an array"),
        ('{"content": [1]}', "content is not an object"),
    ],
)
def test_parse_call_tool_result_errors(raw, message):
    with pytest.raises(ContentParseError) as info:
        parse_call_tool_result(raw)
    assert str(info.value) == message


def test_parse_call_tool_result_invalid_json():
    with pytest.raises(ContentParseError) as info:
        parse_call_tool_result('{"content": ')
    assert str(info.value).startswith("failed to unmarshal response")
    assert isinstance(info.value, McpError)


@pytest.mark.parametrize(
    "content, message",
    [
        ({"type": "text", "text": ""}, "text is missing"),
        ({"type": "image", "data": "x"}, "image data or mimeType is missing"),
        ({"type": "resource"}, "resource is missing"),
        ({"type": "audio"}, "unsupported content type: audio"),
    ],
)
def test_parse_content_errors(content, message):
    with pytest.raises(ContentParseError) as info:
        parse_content(content)
    assert str(info.value) == message


def test_parse_embedded_resource():
    content = parse_content(
        {"type": "resource", "resource": {"uri": "file:///a.txt", "text": "hello", "mimeType": "text/plain"}}
    )
    assert isinstance(content, EmbeddedResource)
    assert content.resource == TextResourceContents(uri="file:///a.txt", text="hello", mime_type="text/plain")


def test_parse_resource_contents_blob():
    contents = parse_resource_contents({"uri": "file:///b.bin", "blob": "AAEC"})
    assert contents == BlobResourceContents(uri="file:///b.bin", blob="AAEC")


@pytest.mark.parametrize(
    "content, message",
    [
        ({"text": "x"}, "resource uri is missing"),
        ({"uri": "file:///c"}, "unsupported resource type"),
    ],
)
def test_parse_resource_contents_errors(content, message):
    with pytest.raises(ContentParseError) as info:
        parse_resource_contents(content)
    assert str(info.value) == message


def test_list_tools_result_to_dict():
    tools = [new_tool("tool1", with_description("Tool 1")), new_tool("tool2")]
    data = ListToolsResult(tools=tools).to_dict()
    assert [tool["name"] for tool in data["tools"]] == ["tool1", "tool2"]
    assert "nextCursor" not in data


def test_call_tool_result_default_is_empty():
    assert CallToolResult().to_dict() == {"content": []}