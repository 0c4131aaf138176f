"""Run .http request files against HTTP, GraphQL, WebSocket and RSocket endpoints."""

__version__ = "0.1.0"
