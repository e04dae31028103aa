"""Completion client and transport."""

from ideagpt.completion.client import (
    CompletionClient,
    CompletionRequestError,
    CompletionTransport,
    RequestsCompletionTransport,
    build_completion_client,
)
from ideagpt.completion.types import CompletionRequest, TransportResponse

__all__ = [
    "CompletionClient",
    "CompletionRequest",
    "CompletionRequestError",
    "CompletionTransport",
    "RequestsCompletionTransport",
    "TransportResponse",
    "build_completion_client",
]
