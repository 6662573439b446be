import json
import re
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

MISSING_KEY_MESSAGE = "Chave da API do Gemini não configurada"
INVALID_JSON_MESSAGE = "Resposta JSON inválida do Gemini"
INTERNAL_ERROR_MESSAGE = "Erro interno do servidor"
REFUSAL_MESSAGE = "FALHA NA GERAÇÃO, TERMOS NÃO RELACIONADOS A TESTES DE SOFTWARE ENCONTRADOS"

_LEADING_FENCE = re.compile(r"^```[\w+#.-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```$")


class InvalidBodyError(ValueError):
    pass


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=CORS_HEADERS)


def preflight_response() -> Response:
    return PlainTextResponse("ok", headers=CORS_HEADERS)


def strip_code_fence(text: str) -> str:
    """Remove a leading ```lang and a trailing ``` fence if the model added them."""
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned


async def read_json_body(request: Request) -> Dict[str, Any]:
    raw = await request.body()
    try:
        body = json.loads(raw or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidBodyError(str(e))
    return body if isinstance(body, dict) else {}


def field(source: Any, name: str) -> str:
    """Read a prompt field; missing values render as empty text."""
    if isinstance(source, dict):
        value = source.get(name)
    else:
        value = None
    return "" if value is None else str(value)
