"""Chat log schemas."""

from pydantic import BaseModel, ConfigDict


class ChatMessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    text: str
    sender: str
    timestamp: str


class ChatMessageCreate(BaseModel):
    text: str
    sender: str | None = None


class ChatMessageAck(BaseModel):
    success: bool = True
    message: ChatMessageOut


class ChatMessageList(BaseModel):
    messages: list[ChatMessageOut]
