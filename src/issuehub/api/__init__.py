"""HTTP and WebSocket surface for IssueHub."""

from issuehub.api.app import create_app
from issuehub.api.models import APIResponse, IssueCreate, IssueResponse
from issuehub.api.runtime import Runtime

__all__ = [
    "APIResponse",
    "IssueCreate",
    "IssueResponse",
    "Runtime",
    "create_app",
]
