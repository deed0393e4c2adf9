# entregas_api/core/config.py
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    CONFIGURAÇÃO CENTRALIZADA: Usa Pydantic para validação
    e carregamento de variáveis de ambiente.

    PADRÃO 12-FACTOR APP: Configuração via ambiente (ou arquivo .env).
    Os nomes dos campos são as variáveis de ambiente, sem diferenciar
    maiúsculas de minúsculas (ex.: MONGO_URI -> mongo_uri).
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Configurações da aplicação
    app_name: str = Field(default="API de Clientes e Entregas")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Persistência: "mongo" em produção, "memoria" para execuções locais
    armazenamento: Literal["mongo", "memoria"] = Field(default="mongo")
    mongo_uri: Optional[str] = Field(default=None)
    mongo_db_name: str = Field(default="db_mongoose")
    mongo_connect_timeout_ms: int = Field(default=5000)
    mongo_connect_retries: int = Field(default=3, ge=1)

    # Credencial única do Basic Auth
    api_usuario: str = Field(default="UsuarioValido")
    api_senha: str = Field(default="SenhaValida")

    # Configurações de logging
    log_level: str = Field(default="INFO")


# Instância global de configurações
settings = Settings()
