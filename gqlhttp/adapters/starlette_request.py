from io import BytesIO
from starlette.requests import Request
from gqlhttp.decoders.incoming import IncomingRequest


async def from_starlette(request: Request) -> IncomingRequest:
    # Only a POST body can carry options, other bodies are left unread
    body = None
    if request.method.upper() == "POST":
        body = BytesIO(await request.body())
    return IncomingRequest(
        request.method,
        headers=request.headers,
        query_params=request.query_params,
        body=body,
    )
