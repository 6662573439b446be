from abc import ABC, abstractmethod


class IAIService(ABC):
    """Interface for generative-language model operations"""

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials for the model provider are available"""
        pass

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Send a single-turn prompt and return the first candidate's text.

        Raises UpstreamModelError when the provider rejects the call and
        EmptyModelResponseError when it answers without candidates.
        """
        pass
