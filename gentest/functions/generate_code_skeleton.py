"""generate-code-skeleton: turn a test case into a runnable test script."""
from typing import Any, Dict

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, Response

from gentest.core.exceptions import UpstreamModelError
from gentest.functions.common import (
    CORS_HEADERS,
    INTERNAL_ERROR_MESSAGE,
    INVALID_JSON_MESSAGE,
    MISSING_KEY_MESSAGE,
    REFUSAL_MESSAGE,
    InvalidBodyError,
    error_response,
    field,
    read_json_body,
    strip_code_fence,
)
from gentest.repositories.interfaces.ai_service import IAIService

logger = structlog.get_logger()


def build_prompt(test_case: Dict[str, Any], framework: str) -> str:
    return f"""
Aja como um Engenheiro de Automação de Testes Sênior.
Gere um script de teste automatizado utilizando o framework: "{framework}".

Contexto do Teste:
- Título: {field(test_case, "title")}
- Descrição: {field(test_case, "description")}
- Pré-condição: {field(test_case, "precondition")}
- Passos: {field(test_case, "steps")}
- Resultado Esperado: {field(test_case, "expectedResult")}

REGRAS:
1. Retorne APENAS o código fonte. Não inclua explicações, comentários introdutórios ou conclusões.
2. O código deve ser completo e executável (imports, setup, assertions).
3. Se for Cypress, use sintaxe cy.get(). Se for Playwright, use await page.locator().
4. Inclua comentários no código explicando o que cada bloco faz.
5. NÃO inclua ``` ou qualquer outra marcação no início ou fim da sua resposta.
6. SE ALGUMA INFORMAÇÃO DE CONTEXTO, POR MÍNIMA QUE SEJA, FOR FORNECIDA E NÃO ESTIVER RELACIONADA A TESTES DE SOFTWARE, RETORNE APENAS UMA MENSAGEM DE "{REFUSAL_MESSAGE}".
""".strip()


async def handle(request: Request, ai_service: IAIService) -> Response:
    try:
        body = await read_json_body(request)

        test_case = body.get("testCase")
        framework = body.get("framework")
        if not test_case or not framework:
            return error_response("Dados incompletos: testCase e framework são obrigatórios.", 400)

        if not ai_service.is_configured():
            return error_response(f"{MISSING_KEY_MESSAGE}.", 500)

        prompt = build_prompt(test_case, str(framework))
        logger.info("Generating code skeleton", framework=framework, test_case=field(test_case, "title")[:100])

        try:
            text = await ai_service.generate_text(prompt)
        except UpstreamModelError as e:
            return error_response(e.message, 500)

        return JSONResponse({"code": strip_code_fence(text)}, headers=CORS_HEADERS)
    except InvalidBodyError as e:
        logger.error("Invalid JSON body", function="generate-code-skeleton", error=str(e))
        return error_response(INVALID_JSON_MESSAGE, 500)
    except Exception as e:
        logger.error("Unhandled error in generation function", function="generate-code-skeleton", error=str(e), exc_info=True)
        return error_response(INTERNAL_ERROR_MESSAGE, 500)
