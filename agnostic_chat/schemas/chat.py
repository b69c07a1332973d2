from typing import List

from pydantic import BaseModel, Field

from agnostic_chat.schemas.messages import Message


class ChatRequest(BaseModel):
    backend: str = Field(min_length=1)
    messages: List[Message] = Field(min_length=1)
    stream: bool = Field(default=False)


class ChatResponse(BaseModel):
    reply: str
    backend: str
    provider: str
    model: str


class BackendInfo(BaseModel):
    name: str
    provider: str
    model: str
