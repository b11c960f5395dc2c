"""
Teacher oracle backed by an LLM client.

Adapts the provider-level LLMClient to the narrow ``send(prompt) -> str``
contract the session controller depends on. Every provider or transport
error surfaces as OracleFailure.
"""

from collections import deque
from typing import Deque, Optional, Tuple

import httpx
import structlog

from dojo.core.config import game_config, settings
from dojo.core.exceptions import OracleFailure
from dojo.llm.client import LLMClient
from dojo.llm.prompts.teacher import build_contextual_prompt, get_teacher_system_prompt

log = structlog.get_logger(__name__)


class LLMTeacherOracle:
    """Teacher oracle that keeps a short rolling transcript as context.

    Only successful exchanges enter the transcript. The transcript is
    bounded by ``context_exchanges``; 0 disables context entirely.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        topic: Optional[str] = None,
        context_exchanges: Optional[int] = None,
    ):
        self.llm_client = llm_client
        self.topic = topic or settings.training_topic
        self.system_prompt = get_teacher_system_prompt(self.topic)
        limit = (
            context_exchanges
            if context_exchanges is not None
            else game_config.oracle.context_exchanges
        )
        self._exchanges: Deque[Tuple[str, str]] = deque(maxlen=limit)

    async def send(self, prompt: str) -> str:
        full_prompt = build_contextual_prompt(prompt, list(self._exchanges))

        try:
            response = await self.llm_client.complete(full_prompt, system=self.system_prompt)
        except OracleFailure:
            raise
        except httpx.HTTPError as e:
            log.warning("oracle_transport_error", error_type=type(e).__name__, error=str(e))
            raise OracleFailure(f"Teacher unavailable: {e}") from e
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            # Non-JSON body (gateway pages) or a payload of the wrong shape
            log.warning("oracle_malformed_reply", error_type=type(e).__name__, error=str(e))
            raise OracleFailure(f"Teacher sent a malformed reply: {e}") from e

        if not isinstance(response.content, str) or not response.content.strip():
            raise OracleFailure("Teacher returned an empty reply")

        if self._exchanges.maxlen:
            self._exchanges.append((prompt, response.content))
        return response.content

    def reset(self) -> None:
        """Forget the rolling transcript so the next prompt starts cold."""
        if self._exchanges:
            log.debug("oracle_context_cleared", exchanges=len(self._exchanges))
        self._exchanges.clear()
