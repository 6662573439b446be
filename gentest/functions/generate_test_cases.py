"""generate-test-cases: turn a use case into a JSON array of test cases.

The reply text is returned as-is after fence cleanup; its shape is not
validated here, callers parse and check it.
"""
from typing import Any, Dict

import structlog
from fastapi import Request
from fastapi.responses import Response

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
from gentest.models.schemas import TestCaseType
from gentest.repositories.interfaces.ai_service import IAIService

logger = structlog.get_logger()


def build_prompt(use_case: Dict[str, Any]) -> str:
    types = ", ".join(f'"{t.value}"' for t in TestCaseType)
    return f"""
Aja como um Engenheiro de QA Sênior especialista em testes de software.
Seu objetivo é criar casos de teste detalhados a partir de um caso de uso.

REGRAS DE SAÍDA:
- Forneça a resposta APENAS em formato JSON, dentro de um array.
- O JSON deve ser um array de objetos, onde cada objeto tem: "title", "description", "type", "precondition", "steps" e "expected_result".
- O "title" deve ser um resumo curto e descritivo do teste.
- A "description" deve ser uma explicação breve do objetivo deste teste.
- O "type" deve ser um destes valores: {types}.
- Os valores dentro de cada atributo do objeto DEVERÃO ser escritos em português.
- NÃO inclua ```json ou ``` no início ou fim da sua resposta.

- CASO ALGUMA INFORMAÇÃO NO CASO DE USO ABAIXO FAÇA REFERÊNCIA A OUTROS TÓPICOS QUE NÃO SEJAM RELACIONADOS A TESTES DE SOFTWARE, NÃO GERE OS CASOS DE TESTE. APENAS RETORNE UMA MENSAGEM DE "{REFUSAL_MESSAGE}".

CASO DE USO FORNECIDO:
- Nome: {field(use_case, "name")}
- Ator: {field(use_case, "actor")}
- Pré-condições: {field(use_case, "preConditions")}
- Fluxo Principal: {field(use_case, "mainFlow")}
- Fluxos Alternativos/Exceção: {field(use_case, "alternativeFlows")}

Gere os casos de teste:
""".strip()


async def handle(request: Request, ai_service: IAIService) -> Response:
    try:
        body = await read_json_body(request)

        use_case = body.get("useCase")
        if not use_case:
            return error_response('Nenhum "useCase" fornecido no corpo', 400)

        if not ai_service.is_configured():
            return error_response(MISSING_KEY_MESSAGE, 500)

        prompt = build_prompt(use_case)
        logger.info("Generating test cases", use_case=field(use_case, "name")[:100])

        try:
            text = await ai_service.generate_text(prompt)
        except UpstreamModelError as e:
            return error_response(e.message, 500)

        return Response(
            content=strip_code_fence(text),
            media_type="application/json",
            headers=CORS_HEADERS,
        )
    except InvalidBodyError as e:
        logger.error("Invalid JSON body", function="generate-test-cases", error=str(e))
        return error_response(INVALID_JSON_MESSAGE, 500)
    except Exception as e:
        logger.error("Unhandled error in generation function", function="generate-test-cases", error=str(e), exc_info=True)
        return error_response(INTERNAL_ERROR_MESSAGE, 500)
