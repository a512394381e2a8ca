"""Chat log routes."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from filedeck.api.deps import get_services
from filedeck.schemas.chat import (
    ChatMessageAck,
    ChatMessageCreate,
    ChatMessageList,
    ChatMessageOut,
)
from filedeck.services import Services
from filedeck.services.chat_log import EmptyMessage

router = APIRouter()


@router.get("", response_model=ChatMessageList)
async def list_messages(services: Services = Depends(get_services)):
    messages = await asyncio.to_thread(services.chat.read_messages)
    return ChatMessageList(messages=[ChatMessageOut.model_validate(m) for m in messages])


@router.post("", response_model=ChatMessageAck)
async def add_message(body: ChatMessageCreate, services: Services = Depends(get_services)):
    try:
        message = await asyncio.to_thread(services.chat.add_message, body.text, body.sender)
    except EmptyMessage as e:
        raise HTTPException(400, str(e))
    return ChatMessageAck(message=ChatMessageOut.model_validate(message))


@router.delete("")
async def clear_messages(services: Services = Depends(get_services)):
    await asyncio.to_thread(services.chat.clear)
    return {"success": True}
