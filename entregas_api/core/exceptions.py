# entregas_api/core/exceptions.py
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

MENSAGEM_ERRO_INTERNO = "Ocorreu um erro interno no servidor."


class ApiException(Exception):
    """
    EXCEÇÃO BASE: Conjunto fechado de erros de negócio da API.

    CONCEITO: Cada variante carrega mensagem, status HTTP e lista de
    detalhes; um único conjunto de handlers traduz para a resposta.
    """
    status_code: int = 500

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.errors = errors if errors is not None else [message]
        self.headers = headers
        super().__init__(self.message)


class BadRequestException(ApiException):
    """Falha de validação semântica; aceita uma ou mais mensagens."""
    status_code = 400

    def __init__(self, messages: List[str]):
        super().__init__(message=",".join(messages), errors=list(messages))


class NaoAutorizadoException(ApiException):
    """Credenciais de Basic Auth ausentes ou inválidas."""
    status_code = 401

    def __init__(self, message: str = "Acesso não autorizado"):
        super().__init__(
            message=message,
            headers={"WWW-Authenticate": 'Basic realm="Protected Route"'},
        )


class NotFoundException(ApiException):
    status_code = 404

    def __init__(self, message: str = "Dado não encontrado"):
        super().__init__(message=message)


class ConflictException(ApiException):
    status_code = 409

    def __init__(
        self,
        message: str = "Conflito: o recurso já existe ou os dados violam uma restrição única.",
    ):
        super().__init__(message=message)


class BdException(ApiException):
    """Erro interno de banco de dados; o detalhe só vai para o log."""
    status_code = 500

    def __init__(self, message: str):
        logging.error(f"Banco de dados Error: {message}")
        super().__init__(message=MENSAGEM_ERRO_INTERNO)


def _corpo_erro(request: Request, status_code: int, message: str, errors: List[str]) -> dict:
    return {
        "status": status_code,
        "message": message,
        "errors": errors,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
    }


# Exception Handlers
async def api_exception_handler(request: Request, exc: ApiException):
    """
    HANDLER CUSTOMIZADO: Trata exceções específicas da aplicação.

    PADRONIZAÇÃO: Garante formato consistente de erro
    """
    logging.warning(
        f"[API ERROR] Status: {exc.status_code} | Message: {exc.message} | Path: {request.url.path}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_corpo_erro(request, exc.status_code, exc.message, exc.errors),
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    HANDLER PYDANTIC: Erros de formato da requisição viram 400,
    uma mensagem por campo inválido.
    """
    errors = [
        f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=_corpo_erro(request, 400, "Dados inválidos fornecidos", errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    HANDLER HTTP: Padroniza respostas HTTPException (rotas inexistentes,
    métodos não permitidos, credenciais malformadas).
    """
    if exc.status_code == 404:
        message = f"Rota não disponível: {request.method} {request.url.path}"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_corpo_erro(request, exc.status_code, message, [message]),
        headers=getattr(exc, "headers", None),
    )


async def database_exception_handler(request: Request, exc: PyMongoError):
    """HANDLER DE BANCO: Falhas do driver viram 500 sem vazar detalhes."""
    return await api_exception_handler(request, BdException(str(exc)))


async def general_exception_handler(request: Request, exc: Exception):
    """
    HANDLER GENÉRICO: Captura erros não tratados.

    SEGURANÇA: Não expõe detalhes internos ao cliente
    """
    logging.error(f"[SERVER ERROR] Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content=_corpo_erro(request, 500, MENSAGEM_ERRO_INTERNO, [MENSAGEM_ERRO_INTERNO]),
    )
