# entregas_api/core/security.py
from typing import Optional
import logging
import secrets

from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from passlib.context import CryptContext

from .config import settings
from .exceptions import NaoAutorizadoException

# HASH DE SENHAS: pbkdf2_sha256 não depende de backend nativo
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

basic_auth = HTTPBasic(auto_error=False)


def gerar_hash_senha(senha: str) -> str:
    """Gera o hash que é persistido no lugar da senha em texto puro."""
    return pwd_context.hash(senha)


def _comparar(recebido: str, esperado: str) -> bool:
    # compare_digest evita vazamento por tempo de resposta
    return secrets.compare_digest(recebido.encode("utf-8"), esperado.encode("utf-8"))


async def verificar_credenciais(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
) -> str:
    """
    DEPENDENCY DE AUTENTICAÇÃO: Valida o Basic Auth compartilhado.

    USO:
    app.include_router(router, dependencies=[Depends(verificar_credenciais)])

    Retorna o nome do usuário autenticado.
    """
    if credentials is None:
        raise NaoAutorizadoException("Credenciais de autenticação são necessárias")

    usuario_valido = _comparar(credentials.username, settings.api_usuario)
    senha_valida = _comparar(credentials.password, settings.api_senha)

    if not (usuario_valido and senha_valida):
        logging.warning(f"Tentativa de acesso com credenciais inválidas: {credentials.username}")
        raise NaoAutorizadoException()

    return credentials.username
