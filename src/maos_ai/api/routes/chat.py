"""Chat endpoint: user message in, normalized answer out."""

from typing import Annotated, Any

import pydantic
from fastapi import APIRouter, Depends, Request

from maos_ai.api.deps import bind_session, get_chat_gateway
from maos_ai.api.ratelimit import RATE_LIMIT_AI, limiter
from maos_ai.api.schemas import ChatRequestBody, ChatResponseBody
from maos_ai.domain.chat.gateway import ChatGateway
from maos_ai.observability.metrics import CHAT_RESPONSES
from maos_ai.shared.concurrency import cancel_on_disconnect
from maos_ai.shared.context import SessionContext
from maos_ai.shared.exceptions import ValidationError
from maos_ai.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["chat"])


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


@router.post("/chat", response_model=ChatResponseBody)
@limiter.limit(RATE_LIMIT_AI)
async def chat(
    request: Request,
    gateway: Annotated[ChatGateway, Depends(get_chat_gateway)],
    session: Annotated[SessionContext, Depends(bind_session)],
) -> ChatResponseBody:
    """Answer the latest user message of a conversation.

    A payload without a ``messages`` list gets the static greeting rather
    than an error status.
    """
    payload = await _read_json(request)
    if not isinstance(payload, dict) or not isinstance(payload.get("messages"), list):
        logger.info("chat_payload_without_messages")
        CHAT_RESPONSES.labels(path="greeting").inc()
        return ChatResponseBody.from_domain(gateway.greeting())

    try:
        body = ChatRequestBody.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Requête de chat invalide",
            {"errors": e.errors(include_url=False, include_context=False)},
        )

    logger.debug(
        "chat_request",
        messages=len(body.messages),
        authenticated=session.is_authenticated,
        images=len(body.images),
        files=len(body.files),
    )
    response = await cancel_on_disconnect(request, gateway.respond(body.to_domain()))
    return ChatResponseBody.from_domain(response)
