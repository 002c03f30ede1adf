from __future__ import annotations

from flask import Blueprint, current_app, request

from app.catalog.modules.chat.client import ChatClient, chat_client_from_config
from app.catalog.modules.chat.schemas import ChatRequest
from app.catalog.validation import validate_payload

bp = Blueprint("chat", __name__)


def _chat_client() -> ChatClient:
    # Tests install a stub under this key.
    client = current_app.extensions.get("chat_client")
    if client is None:
        client = chat_client_from_config(current_app.config)
    return client


@bp.post("/chat")
def chat_post():
    data = validate_payload(ChatRequest, request.get_json(silent=True))
    reply = _chat_client().complete([m.model_dump() for m in data.messages])
    return {"message": {"role": "assistant", "content": reply}}
