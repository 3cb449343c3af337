import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from motor.motor_asyncio import AsyncIOMotorDatabase

from blogapi.auth import identify
from blogapi.config import Settings, get_settings
from blogapi.database import close_client, create_client, get_database
from blogapi.errors import ApiError
from blogapi.gql.app import create_graphql_app, make_schema
from blogapi.repositories.posts import PostRepository
from blogapi.repositories.users import UserRepository
from blogapi.routers import graphql, images
from blogapi.utils.files import ImageStorage

logger = logging.getLogger('blogapi.main')

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]
CORS_HEADERS = ["Content-Type", "Authorization"]


def create_app(settings: Settings | None = None, database: AsyncIOMotorDatabase | None = None) -> FastAPI:
    settings = settings or get_settings()

    # Sin base de datos inyectada se conecta a la configurada
    client = None
    if database is None:
        client = create_client(settings)
        database = get_database(client, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.users.ensure_indexes()
        logger.info(f'Connected to database {settings.DB_NAME}')
        yield
        close_client(client)

    # Instancia de la app FastAPI
    app = FastAPI(
        title="Blog GraphQL API",
        description="Backend de un blog: usuarios, posts e imágenes sobre GraphQL",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.users = UserRepository(database)
    app.state.posts = PostRepository(database)
    app.state.images = ImageStorage(settings.IMAGES_DIR)
    app.state.graphql = create_graphql_app(make_schema(), graphiql=settings.GRAPHIQL)

    # Identidad de la petición: nunca bloquea, cada operación decide
    @app.middleware("http")
    async def authenticate(request: Request, call_next):
        request.state.identity = identify(request.headers.get("Authorization"), settings)
        return await call_next(request)

    # Configurar CORS (cualquier origen)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    # Registrado al final para quedar por fuera de CORS: todo OPTIONS responde 200
    @app.middleware("http")
    async def preflight(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers={
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
                "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
            })
        return await call_next(request)

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        logger.warning(f'{request.method} {request.url.path} failed: {exc.message}')
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message, "data": exc.data})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f'{request.method} {request.url.path} failed')
        return JSONResponse(status_code=500, content={"message": str(exc), "data": None})

    # Registrar routers
    app.include_router(images.router)
    app.include_router(graphql.router)

    # Imágenes subidas, solo lectura
    app.mount("/images", StaticFiles(directory=settings.IMAGES_DIR), name="images")

    return app


def run():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == '__main__':
    run()
