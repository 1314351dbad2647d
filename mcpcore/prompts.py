"""Prompt descriptions, prompt messages and prompt request/result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from mcpcore.errors import ContentParseError
from mcpcore.tools import parse_content
from mcpcore.types import Content, Role, to_jsonable

METHOD_PROMPTS_GET = "prompts/get"


@dataclass
class PromptArgument:
    """An argument accepted by a prompt."""

    name: str
    description: str = ""
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        if self.required:
            result["required"] = True
        return result


@dataclass
class Prompt:
    """A prompt or prompt template offered by the server."""

    name: str
    description: str = ""
    arguments: list[PromptArgument] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        if self.arguments:
            result["arguments"] = [argument.to_dict() for argument in self.arguments]
        return result


def _role(value: Any) -> Role | str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ContentParseError(
            f"failed to unmarshal prompt message structure: role must be a string, "
            f"got {type(value).__name__}"
        )
    try:
        return Role(value)
    except ValueError:
        return value


@dataclass
class PromptMessage:
    """A message returned by a prompt."""

    role: Role | str
    content: Content | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"role": to_jsonable(self.role), "content": to_jsonable(self.content)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PromptMessage:
        """Decode a message, choosing the concrete content type by its ``type`` field."""
        if not isinstance(data, Mapping):
            raise ContentParseError(
                f"failed to unmarshal prompt message structure: expected an object, "
                f"got {type(data).__name__}"
            )
        role = _role(data.get("role"))
        raw_content = data.get("content")
        if raw_content is None:
            return cls(role=role, content=None)
        if not isinstance(raw_content, Mapping):
            raise ContentParseError(
                f"failed to unmarshal content field: expected an object, "
                f"got {type(raw_content).__name__}"
            )
        try:
            content = parse_content(raw_content)
        except ContentParseError as exc:
            raise ContentParseError(f"failed to parse concrete content: {exc}") from exc
        return cls(role=role, content=content)


@dataclass
class GetPromptRequest:
    """A request to render a prompt with string arguments."""

    name: str
    arguments: dict[str, str] = field(default_factory=dict)
    method: str = METHOD_PROMPTS_GET


@dataclass
class GetPromptResult:
    """A rendered prompt."""

    messages: list[PromptMessage] = field(default_factory=list)
    description: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.meta:
            result["_meta"] = to_jsonable(self.meta)
        if self.description:
            result["description"] = self.description
        result["messages"] = [message.to_dict() for message in self.messages]
        return result


@dataclass
class ListPromptsResult:
    """The prompts returned for a list request."""

    prompts: list[Prompt] = field(default_factory=list)
    next_cursor: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.meta:
            result["_meta"] = to_jsonable(self.meta)
        if self.next_cursor:
            result["nextCursor"] = self.next_cursor
        result["prompts"] = [prompt.to_dict() for prompt in self.prompts]
        return result