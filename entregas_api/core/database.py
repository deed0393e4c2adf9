# entregas_api/core/database.py
from typing import Optional
import logging

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError
from tenacity import (
    AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential
)

from .config import Settings


class ConfiguracaoInvalidaError(RuntimeError):
    """Configuração obrigatória ausente na inicialização."""


class ConexaoMongo:
    """
    Encapsula a conexão com o MongoDB.

    CICLO DE VIDA: criada no lifespan da aplicação, uma única vez por
    processo, e fechada no encerramento.
    """

    def __init__(self, config: Settings):
        self.config = config
        self.cliente: Optional[AsyncMongoClient] = None

    async def conectar(self):
        """
        Abre o cliente e confirma a conectividade com `ping`.

        RETRY: backoff exponencial apenas para erros do driver; depois da
        última tentativa o erro é propagado.
        """
        if not self.config.mongo_uri:
            raise ConfiguracaoInvalidaError(
                "Chave MONGO_URI não encontrada no ambiente. Verifique seu arquivo .env."
            )

        self.cliente = AsyncMongoClient(
            self.config.mongo_uri,
            connectTimeoutMS=self.config.mongo_connect_timeout_ms,
            serverSelectionTimeoutMS=self.config.mongo_connect_timeout_ms,
            tz_aware=True,
        )

        async for tentativa in AsyncRetrying(
            stop=stop_after_attempt(self.config.mongo_connect_retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(PyMongoError),
            before_sleep=before_sleep_log(logging.getLogger(__name__), logging.WARNING),
            reraise=True,
        ):
            with tentativa:
                await self.cliente.admin.command("ping")

        logging.info(f"Conectado ao MongoDB ({self.config.mongo_db_name}).")
        return self.cliente[self.config.mongo_db_name]

    async def desconectar(self) -> None:
        if self.cliente is not None:
            await self.cliente.close()
            self.cliente = None
            logging.info("Conexão com o MongoDB encerrada.")
