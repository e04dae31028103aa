from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompletionRequest:
    model: str
    prompt: str
    max_tokens: int

    def form_fields(self) -> list[tuple[str, str]]:
        """Form body fields in wire order."""
        return [
            ("model", self.model),
            ("prompt", self.prompt),
            ("max_tokens", str(self.max_tokens)),
        ]


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: str
    reason: str = ""

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status_code < 300
