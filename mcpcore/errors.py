"""Exceptions and standard error messages used throughout the MCP core."""

from __future__ import annotations

from typing import Any

ERR_INVALID_TOOL_LIST_FORMAT = "invalid tool list response format"
ERR_INVALID_TOOL_FORMAT = "invalid tool format"
ERR_TOOL_NOT_FOUND = "tool not found"
ERR_INVALID_TOOL_PARAMS = "invalid tool parameters"
ERR_INVALID_JSONRPC_PARAMS = "invalid JSON-RPC parameters"
ERR_INVALID_RESOURCE_FORMAT = "invalid resource format"
ERR_RESOURCE_NOT_FOUND = "resource not found"
ERR_INVALID_PROMPT_FORMAT = "invalid prompt format"
ERR_PROMPT_NOT_FOUND = "prompt not found"
ERR_EMPTY_TOOL_NAME = "tool name cannot be empty"
ERR_TOOL_ALREADY_REGISTERED = "tool already registered"
ERR_TOOL_EXECUTION_FAILED = "tool execution failed"
ERR_EMPTY_RESOURCE_URI = "resource URI cannot be empty"
ERR_EMPTY_PROMPT_NAME = "prompt name cannot be empty"
ERR_INVALID_PARAMS = "invalid parameters"
ERR_MISSING_PARAMS = "missing required parameters"
ERR_ALREADY_INITIALIZED = "client already initialized"
ERR_NOT_INITIALIZED = "client not initialized"
ERR_INVALID_SERVER_URL = "invalid server URL"


class McpError(Exception):
    """Base class for MCP errors; ``message`` is the fixed part, ``detail`` the rest."""

    message = "MCP error"

    def __init__(self, detail: Any = None) -> None:
        self.detail = detail
        if self.message and detail:
            text = f"{self.message}: {detail}"
        elif detail:
            text = str(detail)
        else:
            text = self.message
        super().__init__(text)


class JSONRPCParseError(McpError, ValueError):
    """The data could not be decoded as a JSON-RPC message."""

    message = "failed to parse JSON-RPC message"


class InvalidJSONRPCFormatError(McpError, ValueError):
    """The data is JSON but not a well-formed JSON-RPC message."""

    message = "invalid JSON-RPC format"


class InvalidJSONRPCResponseError(McpError, ValueError):
    """A JSON-RPC response or error object could not be decoded."""

    message = "invalid JSON-RPC response"


class InvalidJSONRPCRequestError(McpError, ValueError):
    """A JSON-RPC request object could not be decoded."""

    message = "invalid JSON-RPC request"


class SessionAlreadyInitializedError(McpError):
    """The session has already completed initialization."""

    message = "session already initialized"


class SessionNotInitializedError(McpError):
    """The session never started initialization."""

    message = "session not initialized"


class TemplateRegistrationError(McpError, ValueError):
    """A resource template could not be registered."""

    message = ""


class ContentParseError(McpError, ValueError):
    """Message content or a tool result could not be decoded."""

    message = ""