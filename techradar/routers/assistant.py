from fastapi import APIRouter

from ..schemas.assistant import Exchange, Message, MessageIn
from ..utils.assistant import GREETING, generate_response

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.get("", response_model=Exchange)
def greet():
    return Exchange(messages=[Message(role="bot", content=GREETING)])


@router.post("/messages", response_model=Exchange)
def send_message(payload: MessageIn):
    """Echoes the user's message followed by the canned reply for it."""
    text = payload.message
    if not text.strip():
        return Exchange(messages=[])
    return Exchange(
        messages=[
            Message(role="user", content=text),
            Message(role="bot", content=generate_response(text)),
        ]
    )
