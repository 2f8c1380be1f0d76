"""Chat orchestration: one user turn in, one assistant turn out."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CompletionError, CompletionErrorKind
from app.models.conversation import TurnRole
from app.repositories.chat_repo import ChatRepository, derive_title
from app.schemas.chat_schema import ChatMessage, SendMessageResponse
from app.services.completion_service import CompletionService

logger = structlog.get_logger()

GENERIC_APOLOGY = (
    "I'm sorry, I'm experiencing technical difficulties right now. "
    "Please try again in a moment, or contact our support team if the issue persists."
)

APOLOGY_MESSAGES: dict[CompletionErrorKind, str] = {
    CompletionErrorKind.UNAUTHORIZED: (
        "I'm sorry, but our AI service is not properly configured. "
        "Please contact our support team for immediate assistance."
    ),
    CompletionErrorKind.QUOTA_EXCEEDED: (
        "I'm sorry, but our AI service is temporarily unavailable due to credit "
        "limits. Please contact our support team for immediate assistance, "
        "or try again later."
    ),
    CompletionErrorKind.RATE_LIMITED: (
        "I'm currently handling a lot of requests. "
        "Please try again in a few moments."
    ),
    CompletionErrorKind.NOT_CONFIGURED: (
        "I'm sorry, but our AI service is not properly set up. "
        "Please contact our support team for help."
    ),
    CompletionErrorKind.TIMEOUT: GENERIC_APOLOGY,
    CompletionErrorKind.BAD_REQUEST: GENERIC_APOLOGY,
    CompletionErrorKind.UNAVAILABLE: GENERIC_APOLOGY,
}


def apology_for(kind: CompletionErrorKind) -> str:
    return APOLOGY_MESSAGES.get(kind, GENERIC_APOLOGY)


class ChatService:
    """Runs a send-message turn against the user's current conversation.

    The reply is always an assistant turn: completion failures become a
    kind-specific apology so the conversation never holds an unanswered
    user turn.
    """

    def __init__(
        self,
        chat_repo: ChatRepository,
        completion_service: CompletionService,
        session: AsyncSession,
        user_id: int,
    ) -> None:
        self._chat_repo = chat_repo
        self._completion = completion_service
        self._session = session
        self._user_id = user_id

    async def send(self, message: str) -> SendMessageResponse:
        """Append the user message and the assistant reply, then persist both."""
        conversation = await self._chat_repo.get_or_create_active(self._user_id)
        self._chat_repo.append_turn(conversation, TurnRole.USER, message)

        context = [ChatMessage.model_validate(turn) for turn in conversation.turns]
        try:
            reply = await self._completion.complete(context)
        except CompletionError as exc:
            logger.warning(
                "Replying with apology",
                user_id=self._user_id,
                chat_id=conversation.id,
                kind=exc.kind,
            )
            reply = apology_for(exc.kind)

        self._chat_repo.append_turn(conversation, TurnRole.ASSISTANT, reply)
        derive_title(conversation)

        await self._chat_repo.save(conversation)
        await self._session.commit()

        logger.info(
            "Chat turn saved",
            user_id=self._user_id,
            chat_id=conversation.id,
            message_count=len(conversation.turns),
        )
        return SendMessageResponse(
            message=reply,
            chat_id=conversation.id,
            message_count=len(conversation.turns),
        )
