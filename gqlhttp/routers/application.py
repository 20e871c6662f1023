from fastapi import APIRouter
from gqlhttp.handler import GraphQLHandler
from gqlhttp.routers.graphql import ContextFactory, build_router as build_graphql_router


def build_router(
    handler: GraphQLHandler,
    context_factory: ContextFactory | None = None,
    graphql_path: str = "/graphql",
) -> APIRouter:
    router = APIRouter(prefix="")
    router.include_router(
        build_graphql_router(handler, context_factory, prefix=graphql_path)
    )
    return router
