from logging import getLogger
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from fastapi_offline import FastAPIOffline
from graphql import GraphQLSchema
from gqlhttp.config.general import General, general
from gqlhttp.config.handler import HandlerSettings
from gqlhttp.handler import GraphQLHandler
from gqlhttp.middleware.requestlogger import RequestLogger
from gqlhttp.observers.errors import ExecutionObserver
from gqlhttp.routers.application import build_router
from gqlhttp.routers.graphql import ContextFactory

logger = getLogger(__name__)


def create_app(
    schema: GraphQLSchema,
    settings: HandlerSettings | None = None,
    context_factory: ContextFactory | None = None,
    observer: ExecutionObserver | None = None,
    config: General | None = None,
) -> FastAPI:
    config = config or general
    # Refuses to build anything without a schema
    handler = GraphQLHandler(schema, settings=settings, observer=observer)

    app = FastAPIOffline(
        title=config.PROJECT_NAME,
        version=config.API_VERSION,
        root_path=config.MOUNT_PATH,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogger)

    app.include_router(
        build_router(handler, context_factory, graphql_path=config.GRAPHQL_PATH)
    )
    if config.STATIC_DIRECTORY:
        app.mount(
            "/",
            StaticFiles(directory=config.STATIC_DIRECTORY, html=True),
            name="static_root",
        )
    logger.info(
        "graphql endpoint ready at %s%s", config.MOUNT_PATH, config.GRAPHQL_PATH
    )
    return app
