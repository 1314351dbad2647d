"""Registry of prompt templates and the handlers for prompt requests."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from mcpcore.errors import ERR_INVALID_PARAMS, ERR_MISSING_PARAMS, ERR_PROMPT_NOT_FOUND
from mcpcore.jsonrpc import (
    ERR_CODE_INTERNAL,
    ERR_CODE_INVALID_PARAMS,
    ERR_CODE_METHOD_NOT_FOUND,
    JSONRPCError,
    JSONRPCRequest,
    new_error_response,
)
from mcpcore.prompts import (
    GetPromptRequest,
    GetPromptResult,
    ListPromptsResult,
    Prompt,
    PromptMessage,
)
from mcpcore.types import Role, TextContent

PromptHandler = Callable[[GetPromptRequest], GetPromptResult]


@dataclass
class _RegisteredPrompt:
    prompt: Prompt
    handler: Optional[PromptHandler]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def build_prompt_messages(
    prompt: Prompt, arguments: Mapping[str, Any] | None
) -> list[PromptMessage]:
    """Render a prompt without a handler: one user message listing its arguments."""
    arguments = arguments or {}
    text = f"This is an example rendering of the {prompt.name} prompt."
    for argument in prompt.arguments:
        if argument.name in arguments:
            text += f"\nParameter {argument.name}: {_format_value(arguments[argument.name])}"
        elif argument.required:
            text += f"\nParameter {argument.name}: [not provided]"
    return [PromptMessage(role=Role.USER, content=TextContent(text=text))]


class PromptManager:
    """Keeps registered prompts in registration order and answers prompt requests.

    Prompt support counts as enabled once the first prompt is registered.
    """

    def __init__(self) -> None:
        self._prompts: dict[str, _RegisteredPrompt] = {}
        self._lock = threading.RLock()

    def register_prompt(self, prompt: Prompt | None, handler: PromptHandler | None) -> None:
        """Register or replace a prompt; prompts without a name are ignored."""
        if prompt is None or not prompt.name:
            return
        with self._lock:
            self._prompts[prompt.name] = _RegisteredPrompt(prompt=prompt, handler=handler)

    def get_prompt(self, name: str) -> Prompt | None:
        """Return the prompt registered under ``name``, or None."""
        with self._lock:
            registered = self._prompts.get(name)
        return registered.prompt if registered is not None else None

    def get_prompts(self) -> list[Prompt]:
        """Return all registered prompts in registration order."""
        with self._lock:
            return [registered.prompt for registered in self._prompts.values()]

    def handle_list_prompts(self, request: JSONRPCRequest) -> ListPromptsResult:
        """Answer a prompts/list request."""
        return ListPromptsResult(prompts=self.get_prompts())

    def handle_get_prompt(self, request: JSONRPCRequest) -> GetPromptResult | JSONRPCError:
        """Answer a prompts/get request."""
        params = request.params
        if not isinstance(params, Mapping):
            return new_error_response(request.id, ERR_CODE_INVALID_PARAMS, ERR_INVALID_PARAMS)
        name = params.get("name")
        if not isinstance(name, str):
            return new_error_response(request.id, ERR_CODE_INVALID_PARAMS, ERR_MISSING_PARAMS)
        arguments = params.get("arguments")
        if not isinstance(arguments, Mapping):
            arguments = None

        with self._lock:
            registered = self._prompts.get(name)
        if registered is None:
            return new_error_response(
                request.id, ERR_CODE_METHOD_NOT_FOUND, f"{ERR_PROMPT_NOT_FOUND}: {name}"
            )

        if registered.handler is not None:
            get_request = GetPromptRequest(
                name=name,
                arguments={
                    key: value
                    for key, value in (arguments or {}).items()
                    if isinstance(value, str)
                },
            )
            try:
                return registered.handler(get_request)
            except Exception as exc:
                return new_error_response(request.id, ERR_CODE_INTERNAL, str(exc))

        return GetPromptResult(
            messages=build_prompt_messages(registered.prompt, arguments),
            description=registered.prompt.description,
        )

    def handle_completion_complete(self, request: JSONRPCRequest) -> JSONRPCError:
        """Answer a completion/complete request for a prompt reference.

        Parameters are validated; completion itself is not offered, so a valid
        request receives a method-not-found error.
        """
        params = request.params
        if not isinstance(params, Mapping):
            return new_error_response(request.id, ERR_CODE_INVALID_PARAMS, ERR_INVALID_PARAMS)
        ref = params.get("ref")
        if not isinstance(ref, Mapping):
            return new_error_response(request.id, ERR_CODE_INVALID_PARAMS, ERR_MISSING_PARAMS)
        if ref.get("type") != "ref/prompt":
            return new_error_response(request.id, ERR_CODE_INVALID_PARAMS, ERR_INVALID_PARAMS)
        prompt_name = ref.get("name")
        if not isinstance(prompt_name, str):
            return new_error_response(request.id, ERR_CODE_INVALID_PARAMS, ERR_MISSING_PARAMS)
        return new_error_response(
            request.id,
            ERR_CODE_METHOD_NOT_FOUND,
            f"completion is not supported for prompt: {prompt_name}",
        )