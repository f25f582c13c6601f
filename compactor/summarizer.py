from __future__ import annotations

import logging
from typing import Callable

import anthropic
import httpx

from .config import SummarizerConfig
from .errors import SummarizationError


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You compact conversation transcripts so the conversation can be resumed in a new session. "
    "Summarize the transcript you are given. Keep decisions, open tasks, file names, commands, "
    "identifiers, errors and their resolutions, and any user preferences. Drop pleasantries and "
    "repetition. Write the summary as plain text in the language of the transcript. "
    "Output only the summary."
)


def _status_detail(exc: anthropic.APIStatusError) -> str:
    body = exc.body
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    if isinstance(body, str) and body:
        return body
    return exc.message


class SummarizerClient:
    def __init__(
        self,
        config: SummarizerConfig,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        # No retries: a failed call aborts the run.
        self._client = anthropic.Anthropic(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=0,
            http_client=http_client,
        )
        self._owns_client = http_client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SummarizerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def summarize(
        self,
        text: str,
        *,
        model: str | None = None,
        on_text: Callable[[str], None] | None = None,
    ) -> str:
        model = model or self._config.model
        logger.debug("requesting summary from %s (%d chars)", model, len(text))
        pieces: list[str] = []
        stopped = False
        try:
            with self._client.messages.stream(
                model=model,
                max_tokens=self._config.max_tokens,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": f"<transcript>\n{text}\n</transcript>"}],
            ) as stream:
                for event in stream:
                    if event.type == "text":
                        pieces.append(event.text)
                        if on_text is not None and event.text:
                            on_text(event.text)
                    elif event.type == "message_stop":
                        stopped = True
                if not stopped:
                    raise SummarizationError("Summarization stream ended early")
                message = stream.get_final_message()
        except anthropic.APIStatusError as exc:
            raise SummarizationError(
                "Summarization request failed",
                status_code=exc.status_code,
                detail=_status_detail(exc),
            ) from exc
        except anthropic.APIConnectionError as exc:
            raise SummarizationError("Summarization request failed", detail=str(exc.__cause__ or exc)) from exc
        except ValueError as exc:
            raise SummarizationError("Malformed stream event", detail=str(exc)) from exc
        if message.stop_reason == "max_tokens":
            raise SummarizationError(
                "Summarization stopped at the token limit",
                detail=f"max_tokens={self._config.max_tokens}",
            )
        summary = "".join(pieces).strip()
        if not summary:
            raise SummarizationError("Summarization returned an empty summary")
        logger.debug("received summary (%d chars, stop_reason=%s)", len(summary), message.stop_reason)
        return summary
