"""Ordered, role-tagged conversation history."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .transcript import Transcript

ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

ROLES = (ROLE_SYSTEM, ROLE_USER, ROLE_ASSISTANT)

PURPOSE_PREFIX = "PURPOSE: "
ROLLBACK_NOTICE = "Last message rolled back"


@dataclass
class Message:
    content: str
    role: str

    def as_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


class MessageLog:
    """Conversation history with the purpose pinned at index 0.

    The order of the remaining messages is insertion order and is replayed to
    the API verbatim on every request. Every mutation is also written to the
    transcript.
    """

    def __init__(self, transcript: Transcript, messages: Optional[List[Message]] = None) -> None:
        self.transcript = transcript
        self._messages: List[Message] = list(messages or [])

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    @property
    def messages(self) -> List[Message]:
        return list(self._messages)

    @property
    def purpose(self) -> Optional[str]:
        if self._messages and self._messages[0].role == ROLE_SYSTEM:
            return self._messages[0].content
        return None

    def set_purpose(self, text: str) -> Message:
        message = Message(content=PURPOSE_PREFIX + text, role=ROLE_SYSTEM)
        if self._messages:
            self._messages[0] = message
        else:
            self._messages.append(message)
        self.transcript.log(message.role, message.content)
        return message

    def record(self, role: str, text: str) -> Message:
        if role not in ROLES:
            raise ValueError(f"unknown role {role!r}")
        message = Message(content=text, role=role)
        self._messages.append(message)
        self.transcript.log(role, text)
        return message

    def rollback_last(self) -> List[Message]:
        """Drop the most recent message, never the purpose at index 0."""
        if len(self._messages) > 1:
            self._messages.pop()
        self.transcript.log(ROLE_SYSTEM, ROLLBACK_NOTICE)
        return self.messages

    def payload(self) -> List[Dict[str, str]]:
        return [m.as_dict() for m in self._messages]
