from types import SimpleNamespace

import pytest
from google.api_core import exceptions as google_exceptions

from gentest.core.exceptions import EmptyModelResponseError, UpstreamModelError
from gentest.repositories.implementations.gemini_service import GeminiService


class FakeModel:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.prompts = []

    def generate_content(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


def _response(*texts):
    parts = [SimpleNamespace(text=text) for text in texts]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


def _service(model):
    service = GeminiService(api_key="")
    service.model = model
    return service


def test_not_configured_without_key():
    assert GeminiService(api_key="").is_configured() is False


@pytest.mark.asyncio
async def test_returns_first_part_text():
    model = FakeModel(response=_response("[]", "ignored"))

    text = await _service(model).generate_text("gere")

    assert text == "[]"
    assert model.prompts == ["gere"]


@pytest.mark.asyncio
async def test_upstream_error_message_is_kept():
    model = FakeModel(error=google_exceptions.ResourceExhausted("Resource has been exhausted"))

    with pytest.raises(UpstreamModelError) as exc_info:
        await _service(model).generate_text("gere")

    assert exc_info.value.message == "Resource has been exhausted"


@pytest.mark.asyncio
async def test_no_candidates():
    model = FakeModel(response=SimpleNamespace(candidates=[]))

    with pytest.raises(EmptyModelResponseError) as exc_info:
        await _service(model).generate_text("gere")

    assert exc_info.value.message == "Nenhuma resposta gerada pelo Gemini."


@pytest.mark.asyncio
async def test_candidate_without_parts():
    model = FakeModel(response=_response())

    with pytest.raises(EmptyModelResponseError):
        await _service(model).generate_text("gere")
