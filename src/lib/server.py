"""
HTTP dispatch for tagpress documents

Builds a FastAPI application that maps requests to documents and renders
them through the DirectiveProcessor:

- every configured RouteEntry is registered for its methods
- a catch-all route serves documents by URL path ("/about" -> about.html,
  "/" -> index.html) for any method, including requests whose method a
  configured route does not accept

The same application serves from the filesystem (development) and from an
embedded table (compiled programs call embedded_main()).
"""

from argparse import ArgumentParser, ArgumentDefaultsHelpFormatter
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from ..config import AppSettings, appsettings
from ..models.context import RequestContext
from ..models.routes import RouteEntry, RouteTable
from ..models.state import ProgramState
from .errors import TagpressError, TemplateNotFound, TemplateReadError
from .log import LOG, state_connectToLogger
from .processor import DirectiveProcessor
from .registry import EmbeddedRegistry, TemplateRegistry


DISPATCHABLE_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")
ALL_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def path_convert(pattern: str) -> str:
    """
    Convert a configured path pattern to Starlette syntax

    A missing leading slash is added and an empty pattern becomes "/".

    Example:
        >>> path_convert("greet")
        '/greet'
        >>> path_convert("/users/:id")
        '/users/{id}'
        >>> path_convert("/static/*")
        '/static/{wildcard:path}'
    """
    if not pattern.startswith("/"):
        pattern = "/" + pattern

    segments = []
    for segment in pattern.split("/"):
        if segment.startswith(":") and len(segment) > 1:
            segment = "{" + segment[1:] + "}"
        elif segment == "*":
            segment = "{wildcard:path}"
        segments.append(segment)
    return "/".join(segments)


def methods_resolve(entry: RouteEntry) -> List[str]:
    """HTTP methods a route entry is registered for; unknown names are skipped"""
    if entry.any_is():
        return list(ALL_METHODS)

    methods: List[str] = []
    for method in entry.methods:
        if method in DISPATCHABLE_METHODS:
            methods.append(method)
        else:
            LOG(f"Ignoring unknown method '{method}' on route {entry.path}", level=2)
    return methods


async def context_fromRequest(request: Request) -> RequestContext:
    """
    Collect the request values visible to output expressions

    Form bodies are only parsed for form content types; names missing from
    the body fall back to the query string.
    """
    query: Dict[str, str] = {}
    for key, value in request.query_params.multi_items():
        query.setdefault(key, value)

    form: Dict[str, str] = dict(query)
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        body: Dict[str, str] = {}
        for key, value in (await request.form()).multi_items():
            if isinstance(value, str):
                body.setdefault(key, value)
        form.update(body)

    url = request.url.path
    if request.url.query:
        url += "?" + request.url.query

    remoteaddr = f"{request.client.host}:{request.client.port}" if request.client else ""

    return RequestContext(
        method=request.method,
        url=url,
        host=request.headers.get("host", ""),
        remoteaddr=remoteaddr,
        query=query,
        form=form,
    )


def app_create(
    registry: TemplateRegistry,
    routes: RouteTable,
    processor: Optional[DirectiveProcessor] = None,
    settings: AppSettings = appsettings,
) -> FastAPI:
    """
    Build the ASGI application serving a registry

    Args:
        registry: Document source (filesystem or embedded)
        routes: Configured routes, registered before the file-based catch-all
        processor: Processor to render with; defaults to one over `registry`
        settings: Application settings (file-based routing mapping)

    Returns:
        FastAPI application
    """
    if processor is None:
        processor = DirectiveProcessor(registry)

    app = FastAPI(
        title="tagpress",
        debug=settings.debug_mode,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_log(request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        LOG(f"{request.method} {request.url.path} -> {response.status_code}", level=1)
        return response

    async def document_respond(request: Request, identifier: str) -> Response:
        try:
            content = registry.fetch(identifier)
        except TemplateNotFound:
            return PlainTextResponse(f"Template not found: {identifier}", status_code=404)
        except TemplateReadError as e:
            return PlainTextResponse(f"Error reading file: {e}", status_code=500)

        context = await context_fromRequest(request)
        try:
            body = processor.expand(content, context)
        except (TagpressError, RecursionError) as e:
            return PlainTextResponse(f"Template processing error: {e}", status_code=500)
        return HTMLResponse(body)

    def routeHandler_make(filename: str) -> Callable:
        async def route_handler(request: Request) -> Response:
            return await document_respond(request, filename)
        return route_handler

    async def file_handler(request: Request) -> Response:
        return await document_respond(request, settings.document_forPath(request.url.path))

    for entry in routes:
        methods = methods_resolve(entry)
        if not methods:
            continue
        app.add_route(path_convert(entry.path), routeHandler_make(entry.file), methods=methods)
        LOG(f"Registered {entry.path} -> {entry.file} [{', '.join(methods)}]", level=2)

    app.add_route("/{path:path}", file_handler, methods=ALL_METHODS)
    return app


def server_run(app: FastAPI, host: str, port: int) -> None:
    """Serve an application with uvicorn until interrupted"""
    uvicorn.run(app, host=host, port=port)


def embedded_main(
    templates: Mapping[str, str],
    routes: Sequence[Dict[str, Any]],
    settings: Optional[Mapping[str, Any]] = None,
    argv: Optional[Sequence[str]] = None,
) -> None:
    """
    Entry point of compiled programs

    Serves only the embedded documents and routes: no filesystem reads and
    no watcher. The embedded settings override whatever the environment or
    a .env file says, so file-based routing and the include limit behave
    as they did at compile time. Host and port stay configurable.

    Args:
        templates: Identifier -> content table baked in at compile time
        routes: RouteTable.as_literal() output baked in at compile time
        settings: AppSettings field values baked in at compile time
        argv: Command line (defaults to sys.argv[1:])
    """
    parser = ArgumentParser(
        description="Compiled tagpress server",
        formatter_class=ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-p", "--port", type=int, default=appsettings.port, help="Port to run the server on")
    parser.add_argument("--host", type=str, default=appsettings.host, help="Interface to bind")
    parser.add_argument("-v", "--verbosity", action="count", default=1, help="Increase output verbosity")
    options = parser.parse_args(argv)

    state = ProgramState(verbosity=options.verbosity, host=options.host, port=options.port)
    state_connectToLogger(state)

    pinned = appsettings.model_copy(update=dict(settings or {}))
    registry = EmbeddedRegistry(templates)
    app = app_create(
        registry,
        RouteTable.from_literal(list(routes)),
        processor=DirectiveProcessor(registry, pinned.include_max_depth),
        settings=pinned,
    )

    LOG(f"Compiled server starting on port {options.port} with {len(registry.identifiers())} templates", level=1)
    server_run(app, options.host, options.port)
