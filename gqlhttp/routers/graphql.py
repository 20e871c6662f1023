from typing import Any, Callable
from io import BytesIO
from fastapi import Request, Depends, APIRouter
from fastapi.responses import Response, StreamingResponse
from gqlhttp.adapters.starlette_request import from_starlette
from gqlhttp.handler import GraphQLHandler
from gqlhttp.policies.capture_authorization import capture_authorization

ContextFactory = Callable[[Request], Any]


def default_context(request: Request) -> dict[str, Any]:
    return {"request": request}


def build_router(
    handler: GraphQLHandler,
    context_factory: ContextFactory | None = None,
    prefix: str = "/graphql",
) -> APIRouter:
    router = APIRouter(prefix=prefix)
    make_context = context_factory or default_context

    # Same entrypoint for GET and POST, the decoder decides where options live
    @router.api_route(
        "", methods=["GET", "POST"], dependencies=[Depends(capture_authorization)]
    )
    async def graphql_request(request: Request):
        status, body = await handler.handle(
            await from_starlette(request),
            context=make_context(request),
            request_id=getattr(request.state, "request_id", None),
            metadata=getattr(request.state, "metadata", None),
        )
        return Response(content=body, status_code=status, media_type="application/json")

    @router.get("/schema.gql")
    async def graphql_schema():
        headers = {"Content-Disposition": 'attachment; filename="schema.gql"'}
        return StreamingResponse(
            BytesIO(handler.print_schema().encode()), headers=headers
        )

    return router
