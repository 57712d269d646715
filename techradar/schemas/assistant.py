from typing import Literal
from pydantic import BaseModel


class Message(BaseModel):
    role: Literal["user", "bot"]
    content: str


class MessageIn(BaseModel):
    message: str = ""


class Exchange(BaseModel):
    messages: list[Message]
