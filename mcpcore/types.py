"""Core MCP protocol value types: roles, annotations, notifications and content."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

CONTENT_TYPE_TEXT = "text"
CONTENT_TYPE_IMAGE = "image"
CONTENT_TYPE_AUDIO = "audio"
CONTENT_TYPE_EMBEDDED_RESOURCE = "embedded_resource"


class Role(str, enum.Enum):
    """The sender or recipient of a message."""

    USER = "user"
    ASSISTANT = "assistant"


def to_jsonable(value: Any) -> Any:
    """Convert protocol objects, enums and containers into plain JSON-ready values."""
    if isinstance(value, enum.Enum):
        return to_jsonable(value.value)
    if not isinstance(value, type):
        converter = getattr(value, "to_dict", None)
        if callable(converter):
            return to_jsonable(converter())
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    return value


@dataclass
class Annotations:
    """Optional hints about the audience and priority of an object."""

    audience: list[Role] = field(default_factory=list)
    priority: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.audience:
            result["audience"] = to_jsonable(self.audience)
        if self.priority:
            result["priority"] = self.priority
        return result


def _add_annotations(result: dict[str, Any], annotations: Annotations | None) -> dict[str, Any]:
    if annotations is not None:
        result["annotations"] = annotations.to_dict()
    return result


@dataclass
class NotificationParams:
    """Notification parameters: an optional ``_meta`` map plus free-form fields."""

    meta: dict[str, Any] | None = None
    additional_fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flatten the parameters into a single JSON object."""
        result: dict[str, Any] = {}
        if self.meta:
            result["_meta"] = dict(self.meta)
        for key, value in self.additional_fields.items():
            if key != "_meta" or "_meta" not in result:
                result[key] = value
        return to_jsonable(result)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> NotificationParams:
        """Split a decoded JSON object into ``_meta`` and the remaining fields."""
        if data is None or (isinstance(data, Mapping) and not data):
            return cls(meta={}, additional_fields={})
        if not isinstance(data, Mapping):
            raise TypeError(f"notification params must be an object, got {type(data).__name__}")

        params = cls()
        for key, value in data.items():
            if key == "_meta":
                if isinstance(value, Mapping):
                    if params.meta is None and value:
                        params.meta = {}
                    if params.meta is not None:
                        params.meta.update(value)
            else:
                params.additional_fields[key] = value
        return params


@dataclass
class Notification:
    """Base MCP notification: a method name and its parameters."""

    method: str
    params: NotificationParams = field(default_factory=NotificationParams)

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "params": self.params.to_dict()}


@dataclass
class TextContent:
    """Text message content."""

    text: str
    annotations: Annotations | None = None
    type: str = CONTENT_TYPE_TEXT

    def to_dict(self) -> dict[str, Any]:
        return _add_annotations({"type": self.type, "text": self.text}, self.annotations)


@dataclass
class ImageContent:
    """Image content carried as base64 data."""

    data: str
    mime_type: str
    annotations: Annotations | None = None
    type: str = CONTENT_TYPE_IMAGE

    def to_dict(self) -> dict[str, Any]:
        result = {"type": self.type, "data": self.data, "mimeType": self.mime_type}
        return _add_annotations(result, self.annotations)


@dataclass
class AudioContent:
    """Audio content carried as base64 data."""

    data: str
    mime_type: str
    annotations: Annotations | None = None
    type: str = CONTENT_TYPE_AUDIO

    def to_dict(self) -> dict[str, Any]:
        result = {"type": self.type, "data": self.data, "mimeType": self.mime_type}
        return _add_annotations(result, self.annotations)


@dataclass
class EmbeddedResource:
    """A resource's contents embedded in a message."""

    resource: Any
    annotations: Annotations | None = None
    type: str = CONTENT_TYPE_EMBEDDED_RESOURCE

    def to_dict(self) -> dict[str, Any]:
        result = {"resource": to_jsonable(self.resource), "type": self.type}
        return _add_annotations(result, self.annotations)


Content = Union[TextContent, ImageContent, AudioContent, EmbeddedResource]


def new_text_content(text: str) -> TextContent:
    """Create text content."""
    return TextContent(text=text)


def new_image_content(data: str, mime_type: str) -> ImageContent:
    """Create image content."""
    return ImageContent(data=data, mime_type=mime_type)


def new_audio_content(data: str, mime_type: str) -> AudioContent:
    """Create audio content."""
    return AudioContent(data=data, mime_type=mime_type)


def new_embedded_resource(resource: Any) -> EmbeddedResource:
    """Create embedded-resource content."""
    return EmbeddedResource(resource=resource)