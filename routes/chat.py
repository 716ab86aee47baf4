"""
Route handlers for chat operations.
Handles the /chat endpoint, per-session history and saved conversations.
"""
from typing import Optional
from fastapi import APIRouter, HTTPException
from models.api_models import ChatRequest, SaveConversationRequest
from models.provider_models import AllProvidersFailedError
from services.generation import GenerationService
from services.history import ChatHistory, ConversationArchive
from utils.constants import CHAT_ERROR_MESSAGE
from utils.logger import app_logger

router = APIRouter()


@router.post("/chat")
async def chat(request: ChatRequest):
    """
    Chat endpoint with server-side conversation history.
    A failed generation is recorded as an apology message from the assistant.
    """
    history = ChatHistory(request.session_id)
    prior = history.get_conversation()
    history.add_message("user", request.message)

    try:
        result = await GenerationService().chat(
            request.message,
            prior,
            request.options.as_payload_options()
        )
    except AllProvidersFailedError as e:
        app_logger.error(f"Chat error: {e}")
        history.add_message("assistant", CHAT_ERROR_MESSAGE)
        return {
            "error": "generation_failed",
            "message": str(e),
            "response": CHAT_ERROR_MESSAGE,
            "session_id": history.session_id,
        }

    reply = history.add_message("assistant", result.content)
    app_logger.info(f"Chat reply from {result.provider_name}: {len(result.content or '')} characters")

    return {
        "response": result.content,
        "provider": result.provider_name,
        "model": result.model,
        "session_id": history.session_id,
        "message_id": reply["id"],
    }


@router.get("/chat/history")
async def get_chat_history(session_id: Optional[str] = None):
    history = ChatHistory(session_id)
    return {"session_id": history.session_id, "messages": history.get_conversation()}


@router.delete("/chat/history")
async def clear_chat_history(session_id: Optional[str] = None):
    """Start a new chat: drop the session's messages."""
    history = ChatHistory(session_id)
    history.clear()
    return {"session_id": history.session_id, "cleared": True}


@router.post("/chat/save")
async def save_conversation(request: SaveConversationRequest):
    """Archive the session's current conversation."""
    conversation = ChatHistory(request.session_id).get_conversation()
    if not conversation:
        raise HTTPException(status_code=400, detail="Nothing to save: conversation is empty")

    return ConversationArchive().save(conversation, chat_id=request.chat_id, model=request.model)


@router.get("/chat/conversations")
async def list_conversations():
    return {"conversations": ConversationArchive().entries()}


@router.get("/chat/conversations/{chat_id}")
async def get_conversation(chat_id: str):
    chat = ConversationArchive().get(chat_id)
    if chat is None:
        raise HTTPException(status_code=404, detail=f"Conversation '{chat_id}' not found")
    return chat


@router.delete("/chat/conversations/{chat_id}")
async def delete_conversation(chat_id: str):
    if not ConversationArchive().delete(chat_id):
        raise HTTPException(status_code=404, detail=f"Conversation '{chat_id}' not found")
    return {"deleted": chat_id}
