from fastapi import Request
from gqlhttp.interfaces.context import RequestMetadata


async def capture_authorization(request: Request):
    # Resolvers receive the raw credential, verifying it is their concern
    setattr(request.state, "metadata", RequestMetadata.from_headers(request.headers))
