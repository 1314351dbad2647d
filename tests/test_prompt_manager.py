import pytest

from mcpcore.errors import ERR_INVALID_PARAMS, ERR_MISSING_PARAMS, ERR_PROMPT_NOT_FOUND
from mcpcore.jsonrpc import (
    ERR_CODE_INTERNAL,
    ERR_CODE_INVALID_PARAMS,
    ERR_CODE_METHOD_NOT_FOUND,
    JSONRPCError,
    JSONRPCRequest,
    new_request,
)
from mcpcore.prompt_manager import PromptManager, build_prompt_messages
from mcpcore.prompts import GetPromptResult, ListPromptsResult, Prompt, PromptArgument, PromptMessage
from mcpcore.types import Role, TextContent, new_text_content


def dummy_handler(request):
    return GetPromptResult(
        description="Dummy prompt response",
        messages=[PromptMessage(role=Role.ASSISTANT, content=new_text_content("Dummy prompt response"))],
    )


def greet_prompt():
    return Prompt(
        name="greet",
        description="Greets someone",
        arguments=[
            PromptArgument(name="name", required=True),
            PromptArgument(name="style"),
            PromptArgument(name="tone", required=True),
        ],
    )


def test_register_and_get_prompt():
    manager = PromptManager()
    prompt = Prompt(name="test-prompt")
    manager.register_prompt(prompt, dummy_handler)
    assert manager.get_prompt("test-prompt") is prompt
    assert manager.get_prompt("missing") is None


def test_register_ignores_unnamed_and_none():
    manager = PromptManager()
    manager.register_prompt(None, dummy_handler)
    manager.register_prompt(Prompt(name=""), dummy_handler)
    assert manager.get_prompts() == []


def test_get_prompts_keeps_registration_order_and_replaces():
    manager = PromptManager()
    first, second = Prompt(name="a"), Prompt(name="b")
    manager.register_prompt(first, None)
    manager.register_prompt(second, None)
    replacement = Prompt(name="a", description="new")
    manager.register_prompt(replacement, None)
    assert manager.get_prompts() == [replacement, second]


def test_handle_list_prompts():
    manager = PromptManager()
    prompt = greet_prompt()
    manager.register_prompt(prompt, None)
    result = manager.handle_list_prompts(new_request(1, "prompts/list", None))
    assert isinstance(result, ListPromptsResult)
    assert result.prompts == [prompt]


def test_handle_list_prompts_empty():
    result = PromptManager().handle_list_prompts(new_request(1, "prompts/list", None))
    assert result.prompts == []


def test_get_prompt_default_rendering():
    manager = PromptManager()
    manager.register_prompt(greet_prompt(), None)
    request = new_request("g1", "prompts/get", {"name": "greet", "arguments": {"name": "Alice"}})
    result = manager.handle_get_prompt(request)
    assert isinstance(result, GetPromptResult)
    assert result.description == "Greets someone"
    assert len(result.messages) == 1
    message = result.messages[0]
    assert message.role == Role.USER
    assert isinstance(message.content, TextContent)
    lines = message.content.text.split("\n")
    assert lines[0] == "This is an example rendering of the greet prompt."
    assert lines[1] == "Parameter name: Alice"
    assert lines[2] == "Parameter tone: [not provided]"
    assert len(lines) == 3


def test_get_prompt_without_arguments():
    manager = PromptManager()
    manager.register_prompt(Prompt(name="plain"), None)
    result = manager.handle_get_prompt(new_request(1, "prompts/get", {"name": "plain"}))
    assert result.messages[0].content.text == "This is an example rendering of the plain prompt."


def test_get_prompt_calls_handler_with_string_arguments():
    seen = []

    def handler(request):
        seen.append(request)
        return dummy_handler(request)

    manager = PromptManager()
    manager.register_prompt(greet_prompt(), handler)
    request = new_request(1, "prompts/get", {"name": "greet", "arguments": {"name": "Bob", "count": 3}})
    result = manager.handle_get_prompt(request)
    assert result.description == "Dummy prompt response"
    assert len(seen) == 1
    assert seen[0].name == "greet"
    assert seen[0].arguments == {"name": "Bob"}


def test_get_prompt_handler_error_becomes_internal_error():
    def handler(request):
        raise RuntimeError("boom")

    manager = PromptManager()
    manager.register_prompt(Prompt(name="bad"), handler)
    result = manager.handle_get_prompt(new_request(7, "prompts/get", {"name": "bad"}))
    assert isinstance(result, JSONRPCError)
    assert result.id == 7
    assert result.error.code == ERR_CODE_INTERNAL
    assert result.error.message == "boom"


def test_get_prompt_not_found():
    result = PromptManager().handle_get_prompt(new_request(2, "prompts/get", {"name": "nope"}))
    assert isinstance(result, JSONRPCError)
    assert result.error.code == ERR_CODE_METHOD_NOT_FOUND
    assert result.error.message == f"{ERR_PROMPT_NOT_FOUND}: nope"


@pytest.mark.parametrize(
    "params, message",
    [
        (None, ERR_INVALID_PARAMS),
        ("text", ERR_INVALID_PARAMS),
        ({}, ERR_MISSING_PARAMS),
        ({"name": 5}, ERR_MISSING_PARAMS),
    ],
)
def test_get_prompt_bad_params(params, message):
    request = JSONRPCRequest(method="prompts/get", id=3, params=params)
    result = PromptManager().handle_get_prompt(request)
    assert isinstance(result, JSONRPCError)
    assert result.error.code == ERR_CODE_INVALID_PARAMS
    assert result.error.message == message


@pytest.mark.parametrize(
    "params, message",
    [
        (None, ERR_INVALID_PARAMS),
        ({}, ERR_MISSING_PARAMS),
        ({"ref": {"type": "ref/resource", "name": "x"}}, ERR_INVALID_PARAMS),
        ({"ref": {"type": "ref/prompt"}}, ERR_MISSING_PARAMS),
    ],
)
def test_completion_bad_params(params, message):
    request = JSONRPCRequest(method="completion/complete", id=4, params=params)
    result = PromptManager().handle_completion_complete(request)
    assert result.error.code == ERR_CODE_INVALID_PARAMS
    assert result.error.message == message


def test_completion_valid_reference_is_method_not_found():
    request = new_request(5, "completion/complete", {"ref": {"type": "ref/prompt", "name": "greet"}})
    result = PromptManager().handle_completion_complete(request)
    assert result.id == 5
    assert result.error.code == ERR_CODE_METHOD_NOT_FOUND


def test_build_prompt_messages_formats_values():
    prompt = Prompt(name="p", arguments=[PromptArgument(name="flag"), PromptArgument(name="n")])
    messages = build_prompt_messages(prompt, {"flag": True, "n": 3.0})
    lines = messages[0].content.text.split("\n")
    assert lines[1] == "Parameter flag: true"
    assert lines[2] == "Parameter n: 3"