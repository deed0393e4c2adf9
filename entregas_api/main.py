# entregas_api/main.py
from contextlib import asynccontextmanager
from typing import Optional
import logging
import time
import uuid

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .container import Container, construir_container_memoria, construir_container_mongo
from .core.config import settings
from .core.database import ConexaoMongo
from .core.exceptions import (
    ApiException, api_exception_handler, database_exception_handler, general_exception_handler,
    http_exception_handler, validation_exception_handler
)
from .core.security import verificar_credenciais
from .routers import clientes, enderecos, entregas, produtos

# Métricas Prometheus
REQUEST_COUNT = Counter("entregas_api_requests_total", "Total requests", ["method", "endpoint", "status"])
REQUEST_DURATION = Histogram("entregas_api_request_duration_seconds", "Request duration")

# CONFIGURAÇÃO DE LOGGING
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    LIFECYCLE MANAGEMENT: Gerencia inicialização e limpeza.

    CONCEITO: a conexão com o banco é aberta uma vez, antes de aceitar
    requisições. Se um container já foi injetado (testes), nada é aberto.
    """
    logging.info(f"Iniciando {settings.app_name}...")
    conexao: Optional[ConexaoMongo] = None

    if getattr(app.state, "container", None) is None:
        if settings.armazenamento == "memoria":
            logging.warning("Armazenamento em memória: os dados não sobrevivem ao processo.")
            app.state.container = construir_container_memoria()
        else:
            conexao = ConexaoMongo(settings)
            try:
                db = await conexao.conectar()
                app.state.container = await construir_container_mongo(db)
            except Exception as e:
                logging.error(f"Falha ao conectar ao MongoDB: {e}")
                await conexao.desconectar()
                raise

    yield  # Aplicação roda aqui

    # LIMPEZA
    logging.info(f"Finalizando {settings.app_name}...")
    if conexao is not None:
        await conexao.desconectar()


async def metrics_middleware(request: Request, call_next):
    """
    MIDDLEWARE PARA MÉTRICAS: Coleta dados para Prometheus.
    """
    start_time = time.time()

    response = await call_next(request)

    REQUEST_COUNT.labels(
        method=request.method,
        endpoint=request.url.path,
        status=response.status_code
    ).inc()

    REQUEST_DURATION.observe(time.time() - start_time)

    return response


async def request_logging_middleware(request: Request, call_next):
    """
    MIDDLEWARE CUSTOMIZADO: Logging e timing de requisições.

    OBSERVABILIDADE: cada requisição recebe um X-Request-ID.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()
    logging.info(f"Request started: {request.method} {request.url.path} [{request_id}]")

    response = await call_next(request)

    process_time = time.time() - start_time
    logging.info(
        f"Request completed: {request.method} {request.url.path} "
        f"[{request_id}] - {response.status_code} - {process_time:.3f}s"
    )

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = str(process_time)

    return response


async def health_check():
    """
    HEALTH CHECK: Endpoint para verificação de saúde.

    USO: Load balancers e monitoramento
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "armazenamento": settings.armazenamento,
        "timestamp": time.time()
    }


async def metrics():
    """Endpoint para métricas do Prometheus."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


async def root():
    """
    ENDPOINT RAIZ: Informações básicas da API.
    """
    return {
        "message": f"Bem-vindo à {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    FÁBRICA DA APLICAÇÃO: monta middlewares, handlers e routers.

    Passar um `container` pronto dispensa o banco (usado nos testes).
    """
    app = FastAPI(
        title=settings.app_name,
        description="API RESTful para clientes, endereços, produtos e entregas",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )
    app.state.container = container

    # MIDDLEWARES
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(metrics_middleware)
    app.middleware("http")(request_logging_middleware)

    # EXCEPTION HANDLERS
    app.add_exception_handler(ApiException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(PyMongoError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # ROUTERS: todos protegidos por Basic Auth
    protegido = [Depends(verificar_credenciais)]
    for modulo in (clientes, enderecos, produtos, entregas):
        app.include_router(modulo.router, prefix="/api", dependencies=protegido)

    app.add_api_route("/health", health_check, methods=["GET"], tags=["health"])
    app.add_api_route("/metrics", metrics, methods=["GET"], tags=["monitoring"])
    app.add_api_route("/", root, methods=["GET"], tags=["root"])

    return app


app = create_app()


def run():
    """Ponto de entrada do comando `entregas-api`."""
    import uvicorn

    if settings.armazenamento == "mongo" and not settings.mongo_uri:
        logging.error("Chave MONGO_URI não encontrada no ambiente. Verifique seu arquivo .env.")
        raise SystemExit(1)

    logging.info(f"Servidor rodando na porta {settings.port}")
    uvicorn.run(
        "entregas_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )


if __name__ == "__main__":
    run()
