"""Result type shared by the outbound message channels."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SendResult:
    success: bool
    provider_message_id: str = ""
    error: str = ""
