"""Protocol types, JSON-RPC messages, and prompt and resource managers for the Model Context Protocol."""

__version__ = "0.1.0"