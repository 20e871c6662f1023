from __future__ import annotations
from json import dumps
from logging import getLogger
from time import perf_counter
from typing import Any
from graphql import ExecutionResult, GraphQLSchema, graphql, print_schema
from gqlhttp.config.handler import HandlerSettings, handler_settings
from gqlhttp.decoders.incoming import IncomingRequest
from gqlhttp.decoders.request_options import decode
from gqlhttp.interfaces.context import RequestMetadata
from gqlhttp.interfaces.schemas import RequestOptions
from gqlhttp.observers.errors import (
    ErrorEvent,
    ExecutionObserver,
    LoggingObserver,
    SlowResponseEvent,
)

logger = getLogger(__name__)


class GraphQLHandler:
    """Executes decoded requests against one schema and serializes the result."""

    schema: GraphQLSchema
    settings: HandlerSettings
    observer: ExecutionObserver

    def __init__(
        self,
        schema: GraphQLSchema,
        settings: HandlerSettings | None = None,
        observer: ExecutionObserver | None = None,
    ):
        if not isinstance(schema, GraphQLSchema):
            raise TypeError("undefined GraphQL schema")
        self.schema = schema
        self.settings = settings or handler_settings
        self.observer = observer or LoggingObserver(
            show_full_stack_trace=self.settings.SHOW_FULL_STACK_TRACE
        )

    async def execute(
        self,
        options: RequestOptions,
        metadata: RequestMetadata,
        context: Any = None,
        request_id: str | None = None,
    ) -> ExecutionResult:
        start = perf_counter()
        result = await graphql(
            self.schema,
            options.query,
            root_value=metadata,
            context_value=context,
            variable_values=options.variables,
            operation_name=options.operationName or None,
        )
        for error in result.errors or []:
            self.observer.on_error(ErrorEvent.from_graphql_error(error, request_id))

        elapsed_ms = (perf_counter() - start) * 1000
        if (
            self.settings.LOG_SLOW_RESPONSES
            and elapsed_ms > self.settings.SLOW_RESPONSE_THRESHOLD_MS
        ):
            self.observer.on_slow_response(
                SlowResponseEvent(elapsed_ms, options.query, request_id)
            )
        return result

    def serialize(self, result: ExecutionResult) -> bytes:
        indent = "\t" if self.settings.PRETTY else None
        return dumps(result.formatted, indent=indent, default=str).encode()

    async def handle(
        self,
        request: IncomingRequest,
        context: Any = None,
        request_id: str | None = None,
        metadata: RequestMetadata | None = None,
    ) -> tuple[int, bytes]:
        # GraphQL level errors travel in the body, the status is always 200
        options = decode(request)
        logger.debug(
            "rid=%s operation=%s variables=%s",
            request_id,
            options.operationName,
            list(options.variables),
        )
        metadata = metadata or RequestMetadata.from_headers(request.headers)
        result = await self.execute(options, metadata, context, request_id)
        return 200, self.serialize(result)

    def print_schema(self) -> str:
        return print_schema(self.schema)
