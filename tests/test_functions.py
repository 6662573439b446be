import pytest

from gentest.core.exceptions import UpstreamModelError
from gentest.functions.common import strip_code_fence
from gentest.functions.generate_test_cases import build_prompt

TEST_CASES_URL = "/functions/v1/generate-test-cases"
SKELETON_URL = "/functions/v1/generate-code-skeleton"


@pytest.fixture
def client(test_client, auth_headers):
    """Test client that sends a signed-in user's bearer token"""
    test_client.headers.update(auth_headers)
    return test_client


@pytest.mark.parametrize("url", [TEST_CASES_URL, SKELETON_URL])
def test_preflight_answers_ok(test_client, url):
    response = test_client.options(url)

    assert response.status_code == 200
    assert response.text == "ok"
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize("url", [TEST_CASES_URL, SKELETON_URL])
def test_functions_reject_anonymous_callers(test_client, ai_service, url):
    response = test_client.post(url, json={"useCase": {"name": "Login"}})

    assert response.status_code == 401
    assert response.json()["detail"] == "Usuário não autenticado."
    assert ai_service.prompts == []


def test_functions_reject_invalid_tokens(test_client, ai_service):
    response = test_client.post(
        TEST_CASES_URL, json={"useCase": {"name": "Login"}}, headers={"Authorization": "Bearer forged"}
    )

    assert response.status_code == 401
    assert ai_service.prompts == []


def test_test_cases_without_use_case(client):
    response = client.post(TEST_CASES_URL, json={})

    assert response.status_code == 400
    assert response.json() == {"error": 'Nenhum "useCase" fornecido no corpo'}
    assert response.headers["access-control-allow-origin"] == "*"


def test_test_cases_without_api_key(client, ai_service):
    ai_service.configured = False

    response = client.post(TEST_CASES_URL, json={"useCase": {"name": "Login"}})

    assert response.status_code == 500
    assert response.json() == {"error": "Chave da API do Gemini não configurada"}
    assert ai_service.prompts == []


def test_test_cases_upstream_error_message_is_forwarded(client, ai_service):
    ai_service.error = UpstreamModelError("Resource has been exhausted")

    response = client.post(TEST_CASES_URL, json={"useCase": {"name": "Login"}})

    assert response.status_code == 500
    assert response.json() == {"error": "Resource has been exhausted"}


def test_test_cases_strips_fence_and_returns_json(client, ai_service):
    ai_service.replies.append('```json\n[{"title": "Login ok"}]\n```')

    response = client.post(TEST_CASES_URL, json={"useCase": {"name": "Login", "mainFlow": "Entrar"}})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == [{"title": "Login ok"}]


def test_test_cases_invalid_body(client):
    response = client.post(
        TEST_CASES_URL, content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Resposta JSON inválida do Gemini"}


def test_skeleton_requires_test_case_and_framework(client):
    response = client.post(SKELETON_URL, json={"testCase": {"title": "Login"}})

    assert response.status_code == 400
    assert response.json() == {"error": "Dados incompletos: testCase e framework são obrigatórios."}


def test_skeleton_without_api_key(client, ai_service):
    ai_service.configured = False

    response = client.post(SKELETON_URL, json={"testCase": {"title": "Login"}, "framework": "JavaScript + Cypress"})

    assert response.status_code == 500
    assert response.json() == {"error": "Chave da API do Gemini não configurada."}


def test_skeleton_returns_code(client, ai_service):
    ai_service.replies.append("```javascript\ndescribe('login', () => {});\n```")

    response = client.post(
        SKELETON_URL,
        json={"testCase": {"title": "Login", "expectedResult": "Painel"}, "framework": "JavaScript + Cypress"},
    )

    assert response.status_code == 200
    assert response.json() == {"code": "describe('login', () => {});"}
    assert "- Resultado Esperado: Painel" in ai_service.prompts[0]


def test_prompt_renders_missing_fields_as_empty():
    prompt = build_prompt({"name": "Login"})

    assert "- Nome: Login" in prompt
    assert "- Ator: \n" in prompt
    assert "None" not in prompt


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('```json\n[{"a": 1}]\n```', '[{"a": 1}]'),
        ("```\ncode\n```", "code"),
        ("  ```python\nprint(1)\n```  \n", "print(1)"),
        ("sem cerca", "sem cerca"),
    ],
)
def test_strip_code_fence(raw, expected):
    assert strip_code_fence(raw) == expected
