"""JSON-RPC 2.0 message types, constructors and parsing."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from mcpcore.errors import (
    InvalidJSONRPCFormatError,
    InvalidJSONRPCRequestError,
    InvalidJSONRPCResponseError,
    JSONRPCParseError,
    McpError,
)
from mcpcore.types import Notification, NotificationParams, to_jsonable

JSONRPC_VERSION = "2.0"

ERR_CODE_PARSE = -32700
ERR_CODE_INVALID_REQUEST = -32600
ERR_CODE_METHOD_NOT_FOUND = -32601
ERR_CODE_INVALID_PARAMS = -32602
ERR_CODE_INTERNAL = -32603

RawMessage = Union[str, bytes, bytearray, Mapping[str, Any]]


class JSONRPCMessageType(str, enum.Enum):
    """The kind of a JSON-RPC message."""

    REQUEST = "request"
    RESPONSE = "response"
    NOTIFICATION = "notification"
    ERROR = "error"
    UNKNOWN = "unknown"


def _decode(data: RawMessage, error_cls: type[McpError]) -> Any:
    if isinstance(data, Mapping):
        return data
    try:
        return json.loads(data)
    except (TypeError, ValueError) as exc:
        raise error_cls(str(exc)) from exc


def _require_object(data: Any, error_cls: type[McpError]) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise error_cls(f"expected a JSON object, got {type(data).__name__}")
    return data


def _optional_str(data: Mapping[str, Any], key: str, error_cls: type[McpError]) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise error_cls(f'field "{key}" must be a string, got {type(value).__name__}')
    return value


@dataclass
class JSONRPCRequest:
    """A JSON-RPC request."""

    method: str
    id: Any = None
    params: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.id is not None:
            result["id"] = to_jsonable(self.id)
        result["method"] = self.method
        if self.params is not None:
            result["params"] = to_jsonable(self.params)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JSONRPCRequest:
        data = _require_object(data, InvalidJSONRPCRequestError)
        return cls(
            method=_optional_str(data, "method", InvalidJSONRPCRequestError),
            id=data.get("id"),
            params=data.get("params"),
            jsonrpc=_optional_str(data, "jsonrpc", InvalidJSONRPCRequestError),
        )


@dataclass
class JSONRPCResponse:
    """A JSON-RPC success response."""

    id: Any = None
    result: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": to_jsonable(self.id)}
        if self.result is not None:
            result["result"] = to_jsonable(self.result)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JSONRPCResponse:
        data = _require_object(data, InvalidJSONRPCResponseError)
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            jsonrpc=_optional_str(data, "jsonrpc", InvalidJSONRPCResponseError),
        )


@dataclass
class JSONRPCErrorDetail:
    """The ``error`` member of a JSON-RPC error response."""

    code: int = 0
    message: str = ""
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = to_jsonable(self.data)
        return result


@dataclass
class JSONRPCError:
    """A JSON-RPC error response."""

    error: JSONRPCErrorDetail = field(default_factory=JSONRPCErrorDetail)
    id: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.id is not None:
            result["id"] = to_jsonable(self.id)
        result["error"] = self.error.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JSONRPCError:
        data = _require_object(data, InvalidJSONRPCResponseError)
        detail = JSONRPCErrorDetail()
        raw_error = data.get("error")
        if raw_error is not None:
            raw_error = _require_object(raw_error, InvalidJSONRPCResponseError)
            code = raw_error.get("code", 0)
            if code is None:
                code = 0
            if isinstance(code, bool) or not isinstance(code, int):
                raise InvalidJSONRPCResponseError(
                    f'field "code" must be an integer, got {code!r}'
                )
            detail = JSONRPCErrorDetail(
                code=code,
                message=_optional_str(raw_error, "message", InvalidJSONRPCResponseError),
                data=raw_error.get("data"),
            )
        return cls(
            error=detail,
            id=data.get("id"),
            jsonrpc=_optional_str(data, "jsonrpc", InvalidJSONRPCResponseError),
        )


@dataclass
class JSONRPCNotification:
    """A JSON-RPC notification."""

    method: str
    params: NotificationParams = field(default_factory=NotificationParams)
    jsonrpc: str = JSONRPC_VERSION

    @property
    def notification(self) -> Notification:
        """The MCP notification carried by this message."""
        return Notification(method=self.method, params=self.params)

    def to_dict(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "method": self.method, "params": self.params.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JSONRPCNotification:
        data = _require_object(data, InvalidJSONRPCFormatError)
        params = NotificationParams()
        if "params" in data:
            try:
                params = NotificationParams.from_dict(data["params"])
            except TypeError as exc:
                raise InvalidJSONRPCFormatError(str(exc)) from exc
        return cls(
            method=_optional_str(data, "method", InvalidJSONRPCFormatError),
            params=params,
            jsonrpc=_optional_str(data, "jsonrpc", InvalidJSONRPCFormatError),
        )


JSONRPCMessage = Union[JSONRPCRequest, JSONRPCResponse, JSONRPCError, JSONRPCNotification]


def new_request(request_id: Any, method: str, params: Mapping[str, Any] | None) -> JSONRPCRequest:
    """Create a request; missing params become an empty object."""
    return JSONRPCRequest(
        method=method,
        id=request_id,
        params={} if params is None else dict(params),
    )


def new_response(request_id: Any, result: Any) -> JSONRPCResponse:
    """Create a success response."""
    return JSONRPCResponse(id=request_id, result=result)


def new_error_response(
    request_id: Any, code: int, message: str, data: Any = None
) -> JSONRPCError:
    """Create an error response."""
    return JSONRPCError(
        error=JSONRPCErrorDetail(code=code, message=message, data=data),
        id=request_id,
    )


def new_notification(notification: Notification) -> JSONRPCNotification:
    """Wrap an MCP notification in a JSON-RPC notification."""
    return JSONRPCNotification(method=notification.method, params=notification.params)


def new_notification_from_map(
    method: str, params: Mapping[str, Any] | None
) -> JSONRPCNotification:
    """Create a notification, moving a ``_meta`` object out of the plain fields."""
    params = params or {}
    notification_params = NotificationParams()
    meta = params.get("_meta")
    if isinstance(meta, Mapping):
        notification_params.meta = dict(meta)
    notification_params.additional_fields = {
        key: value for key, value in params.items() if key != "_meta"
    }
    return new_notification(Notification(method=method, params=notification_params))


def parse_message_type(data: RawMessage) -> JSONRPCMessageType:
    """Work out the kind of a JSON-RPC message from its members."""
    message = _decode(data, JSONRPCParseError)
    if message is not None and not isinstance(message, Mapping):
        raise JSONRPCParseError(f"expected a JSON object, got {type(message).__name__}")
    message = message or {}

    if message.get("jsonrpc") != JSONRPC_VERSION:
        raise InvalidJSONRPCFormatError("invalid or missing jsonrpc version")

    if "id" in message:
        if "error" in message:
            return JSONRPCMessageType.ERROR
        if "result" in message:
            return JSONRPCMessageType.RESPONSE
        return JSONRPCMessageType.REQUEST
    if "method" in message:
        return JSONRPCMessageType.NOTIFICATION
    raise InvalidJSONRPCFormatError()


_PARSERS: dict[JSONRPCMessageType, tuple[type, type[McpError]]] = {
    JSONRPCMessageType.RESPONSE: (JSONRPCResponse, InvalidJSONRPCResponseError),
    JSONRPCMessageType.ERROR: (JSONRPCError, InvalidJSONRPCResponseError),
    JSONRPCMessageType.NOTIFICATION: (JSONRPCNotification, InvalidJSONRPCFormatError),
    JSONRPCMessageType.REQUEST: (JSONRPCRequest, InvalidJSONRPCRequestError),
}


def parse_message(data: RawMessage) -> tuple[JSONRPCMessage, JSONRPCMessageType]:
    """Parse any JSON-RPC message, returning it with its kind."""
    message_type = parse_message_type(data)
    message_cls, error_cls = _PARSERS[message_type]
    decoded = _decode(data, error_cls)
    return message_cls.from_dict(decoded), message_type


def _format_id(request_id: Any) -> str:
    return "<nil>" if request_id is None else str(request_id)


def format_message(message: Any) -> str:
    """Describe a JSON-RPC message in one line, for logging."""
    if isinstance(message, JSONRPCResponse):
        return f"Response(ID={_format_id(message.id)})"
    if isinstance(message, JSONRPCError):
        return (
            f"Error(ID={_format_id(message.id)}, Code={message.error.code}, "
            f"Message={message.error.message})"
        )
    if isinstance(message, JSONRPCNotification):
        return f"Notification(Method={message.method})"
    if isinstance(message, JSONRPCRequest):
        return f"Request(ID={_format_id(message.id)}, Method={message.method})"
    return "Unknown message type"


def is_error_response(raw: RawMessage) -> bool:
    """Tell whether a raw message has an ``error`` member."""
    try:
        message = _decode(raw, JSONRPCParseError)
    except JSONRPCParseError:
        return False
    return isinstance(message, Mapping) and "error" in message


def parse_error(raw: RawMessage) -> JSONRPCError:
    """Parse a raw message as a JSON-RPC error response."""
    try:
        return JSONRPCError.from_dict(_decode(raw, InvalidJSONRPCResponseError))
    except McpError as exc:
        raise InvalidJSONRPCResponseError(
            f"failed to parse JSON-RPC error: {exc.detail or exc}"
        ) from exc