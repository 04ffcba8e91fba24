"""Chat channel contract consumed by the bot."""
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from pydantic import BaseModel


class Choice(BaseModel):
    label: str
    payload: str


class ChatUser(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.first_name or self.username or "there"


class IncomingDocument(BaseModel):
    file_id: str
    file_name: Optional[str] = None
    file_size: Optional[int] = None


class ChatTransport(Protocol):
    def send_text(self, chat_id: str, text: str, choices: Optional[Sequence[Choice]] = None) -> None: ...

    def send_typing(self, chat_id: str) -> None: ...

    def download_attachment(self, file_id: str) -> bytes: ...


__all__ = ["ChatTransport", "ChatUser", "Choice", "IncomingDocument"]
