from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["system", "human", "assistant"]

# accepted spellings for each role
ROLE_ALIASES = {
    "system": "system",
    "human": "human",
    "user": "human",
    "assistant": "assistant",
    "ai": "assistant",
}


def normalize_role(role: str) -> str:
    key = (role or "").strip().lower()
    if key not in ROLE_ALIASES:
        raise ValueError(f"unknown message role: {role!r}")
    return ROLE_ALIASES[key]


class Message(BaseModel):
    """One chat turn. Immutable; identity is its position in a sequence."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = Field(default="")

    @field_validator("role", mode="before")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return normalize_role(v)

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role="system", content=content)

    @classmethod
    def human(cls, content: str) -> "Message":
        return cls(role="human", content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role="assistant", content=content)
