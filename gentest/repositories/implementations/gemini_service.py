import asyncio
from typing import Any, Optional

import google.generativeai as genai
import structlog
from google.api_core import exceptions as google_exceptions

from gentest.config.settings import settings
from gentest.core.exceptions import EmptyModelResponseError, UpstreamModelError
from gentest.repositories.interfaces.ai_service import IAIService

logger = structlog.get_logger()


class GeminiService(IAIService):
    """Google Gemini implementation of AI service."""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None) -> None:
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model_name = model_name or settings.gemini_model
        self.model: Optional[Any] = None
        if self.api_key:
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(self.model_name)

    def is_configured(self) -> bool:
        return self.model is not None

    async def generate_text(self, prompt: str) -> str:
        if not self.model:
            raise UpstreamModelError("Chave da API do Gemini não configurada")

        def sync_call():
            model = self.model
            assert model is not None
            return model.generate_content(prompt)

        try:
            response = await asyncio.get_event_loop().run_in_executor(None, sync_call)
        except google_exceptions.GoogleAPIError as e:
            message = getattr(e, "message", None) or str(e)
            logger.error("Gemini request failed", model=self.model_name, error=message)
            raise UpstreamModelError(message)
        except genai.types.BlockedPromptException as e:
            logger.error("Gemini blocked the prompt", model=self.model_name, error=str(e))
            raise UpstreamModelError(str(e) or "Prompt bloqueado pelo Gemini.")

        return self._first_candidate_text(response)

    def _first_candidate_text(self, response: Any) -> str:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            logger.error("Gemini returned no candidates", model=self.model_name)
            raise EmptyModelResponseError("Nenhuma resposta gerada pelo Gemini.")

        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None) or []
        if not parts:
            logger.error("Gemini candidate has no parts", model=self.model_name)
            raise EmptyModelResponseError("Nenhuma resposta gerada pelo Gemini.")
        return getattr(parts[0], "text", "") or ""
