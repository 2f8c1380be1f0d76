"""Completion gateway: bounded conversation context in, assistant text out."""

from collections.abc import Sequence

import openai
import structlog
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from app.core.exceptions import CompletionError, CompletionErrorKind
from app.schemas.chat_schema import ChatMessage

logger = structlog.get_logger()

SYSTEM_PROMPT = (
    "You are a helpful customer support assistant. "
    "Be concise, friendly, and professional."
)

DEFAULT_MAX_CONTEXT_TURNS = 10

STATUS_KINDS: dict[int, CompletionErrorKind] = {
    400: CompletionErrorKind.BAD_REQUEST,
    401: CompletionErrorKind.UNAUTHORIZED,
    402: CompletionErrorKind.QUOTA_EXCEEDED,
    429: CompletionErrorKind.RATE_LIMITED,
    503: CompletionErrorKind.UNAVAILABLE,
}


def bound_context(
    turns: Sequence[ChatMessage], max_turns: int
) -> list[ChatMessage]:
    """Keep the last ``max_turns`` turns in their original order."""
    if max_turns <= 0:
        return []
    return list(turns[-max_turns:])


def to_langchain_messages(turns: Sequence[ChatMessage]) -> list[BaseMessage]:
    """Prefix the system instruction and convert roles to LangChain messages."""
    messages: list[BaseMessage] = [SystemMessage(content=SYSTEM_PROMPT)]
    for turn in turns:
        if turn.role == "assistant":
            messages.append(AIMessage(content=turn.content))
        else:
            messages.append(HumanMessage(content=turn.content))
    return messages


def classify(exc: Exception) -> CompletionError:
    """Map an SDK or transport failure to a CompletionError."""
    if isinstance(exc, openai.APITimeoutError):
        return CompletionError(CompletionErrorKind.TIMEOUT, detail="request timed out")
    if isinstance(exc, openai.APIStatusError):
        kind = STATUS_KINDS.get(exc.status_code, CompletionErrorKind.UNAVAILABLE)
        return CompletionError(kind, status_code=exc.status_code, detail=exc.message)
    if isinstance(exc, openai.APIConnectionError):
        return CompletionError(CompletionErrorKind.UNAVAILABLE, detail="connection error")
    return CompletionError(CompletionErrorKind.UNAVAILABLE, detail=str(exc))


def _text_of(content: object) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [
            part if isinstance(part, str) else str(part.get("text", ""))
            for part in content
            if isinstance(part, str | dict)
        ]
        return "".join(parts)
    return ""


class CompletionService:
    """Single-attempt call to the chat completion model."""

    def __init__(
        self,
        llm: BaseChatModel | None,
        max_context_turns: int = DEFAULT_MAX_CONTEXT_TURNS,
    ) -> None:
        self._llm = llm
        self._max_context_turns = max_context_turns

    async def complete(self, context_turns: Sequence[ChatMessage]) -> str:
        """Return assistant text for the conversation so far.

        Raises:
            CompletionError: classified failure; never retried here.
        """
        if self._llm is None:
            raise CompletionError(
                CompletionErrorKind.NOT_CONFIGURED,
                detail="completion API key is not configured",
            )

        turns = bound_context(context_turns, self._max_context_turns)
        messages = to_langchain_messages(turns)

        try:
            response = await self._llm.ainvoke(messages)
        except openai.OpenAIError as exc:
            error = classify(exc)
            logger.warning(
                "Completion request failed",
                kind=error.kind,
                status_code=error.status_code,
                detail=error.detail,
            )
            raise error from exc
        except Exception as exc:
            logger.exception("Unexpected completion failure")
            raise classify(exc) from exc

        text = _text_of(response.content).strip()
        if not text:
            logger.warning("Completion returned no content")
            raise CompletionError(CompletionErrorKind.UNAVAILABLE, detail="no content")

        logger.info("Completion received", context_turns=len(turns), chars=len(text))
        return text
