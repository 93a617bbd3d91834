import asyncio
import json
import logging
import signal
from http import HTTPStatus
from pathlib import Path
from time import time
from typing import Any, List, Optional, Tuple, cast

from aiohttp import web
from aiohttp.web import middleware
from aiohttp.web_app import Application
from aiohttp.web_response import json_response
from aiohttp.web_runner import AppRunner, TCPSite

from .config import ServerConfig
from .constants import PATCH_MEDIA_TYPE, VERSION
from .errors import ApplyError, ConfigError, DataParsingError, ParseError, PathNotFoundError
from .logging import configure_logging
from .query import QueryMethod, query
from .store import DocumentStore, only_on_real_changes_update
from .utils.async_utils import readfile, writefile
from .utils.etag import document_etag, strip_quotes
from .utils.parsing import DataFormat, try_to_parse

logger = logging.getLogger(__name__)


class PreconditionFailed(Exception):
    pass


@middleware
async def error_handler(request: web.Request, handler: Any) -> web.Response:
    """
    Generic error handler for route handlers.

    If an exception is thrown during request processing, this middleware catches it
    and responds accordingly.
    """

    try:
        return await handler(request)
    except (ParseError, DataParsingError) as e:
        return web.Response(text=f"request processing error:\n{e}", status=HTTPStatus.BAD_REQUEST)
    except PathNotFoundError as e:
        return web.Response(text=str(e), status=HTTPStatus.NOT_FOUND)
    except ApplyError as e:
        return web.Response(text=str(e), status=HTTPStatus.CONFLICT)


def from_mime_type(mime_type: str) -> DataFormat:
    formats = {
        "application/json": DataFormat.JSON,
        PATCH_MEDIA_TYPE: DataFormat.JSON,
        "application/yaml": DataFormat.YAML,
        "application/octet-stream": DataFormat.JSON,  # default in aiohttp
    }
    if mime_type not in formats:
        raise DataParsingError(f"unsupported MIME type '{mime_type}', expected: {str(list(formats))[1:-1]}")
    return formats[mime_type]


def parse_from_mime_type(data: str, mime_type: str) -> Any:
    try:
        return from_mime_type(mime_type).parse_to_dict(data)
    except json.JSONDecodeError as e:
        raise DataParsingError(f"failed to parse request body: {e}") from e


def _check_etags(request: web.Request, document: Any) -> None:
    etag = document_etag(document)
    if_match: Optional[List[str]] = request.headers.getall("If-Match", None)
    if_none_match: Optional[List[str]] = request.headers.getall("If-None-Match", None)

    if if_match is not None:
        tags = [strip_quotes(t) for h in if_match for t in h.split(",")]
        if "*" not in tags and etag not in tags:
            raise PreconditionFailed()
    if if_none_match is not None:
        tags = [strip_quotes(t) for h in if_none_match for t in h.split(",")]
        if "*" in tags or etag in tags:
            raise PreconditionFailed()


class Server:
    def __init__(self, store: DocumentStore, config: ServerConfig) -> None:
        self.store = store
        self.config = config

        # HTTP server
        self.app = Application(middlewares=[error_handler])
        self.runner = AppRunner(self.app)
        self.site: Optional[TCPSite] = None
        self._exit_code: int = 0
        self._shutdown_event = asyncio.Event()
        self._setup_routes()

    async def start(self) -> None:
        await self.runner.setup()
        listen = self.config.listen
        self.site = TCPSite(self.runner, listen.host, listen.port)
        logger.info(f"Starting API HTTP server on http://{listen.host}:{listen.port}")
        await self.site.start()

    async def wait_for_shutdown(self) -> None:
        await self._shutdown_event.wait()

    def trigger_shutdown(self, exit_code: int) -> None:
        self._shutdown_event.set()
        self._exit_code = exit_code

    def bind_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._signal_handler, sig)

    def _signal_handler(self, sig: signal.Signals) -> None:
        logger.info(f"Received {sig.name}, triggering graceful shutdown")
        self.trigger_shutdown(0)

    async def shutdown(self) -> None:
        if self.site is not None:
            await self.site.stop()
        await self.runner.cleanup()

    def get_exit_code(self) -> int:
        return self._exit_code

    async def _handler_index(self, _request: web.Request) -> web.Response:
        """
        Dummy index handler to indicate that the server is indeed running...
        """
        return json_response(
            {
                "msg": "docpatch is running! The document endpoint is at /v1/document",
                "status": "RUNNING",
                "version": VERSION,
                "revision": self.store.revision,
            }
        )

    async def _handler_document_query(self, request: web.Request) -> web.Response:
        """
        Route handler for reading and changing the document
        """

        payload: Any = None
        if request.method in ("PUT", "PATCH"):
            payload = parse_from_mime_type(await request.text(), request.content_type)
        ptr = request.match_info["path"]
        read_only = request.method in ("GET", "HEAD")
        method = cast(QueryMethod, "get" if read_only else request.method.lower())

        if read_only:
            document = self.store.get()
            try:
                _check_etags(request, document)
            except PreconditionFailed:
                return web.Response(status=HTTPStatus.NOT_MODIFIED)
            _, to_return = query(document, method, ptr)
            new_document = document
        else:

            def change(current: Any) -> Tuple[Any, Tuple[Any, Any]]:
                # checked while holding the store's lock, so nothing can change the document in between
                _check_etags(request, current)
                new, result = query(current, method, ptr, payload)
                return new, (new, result)

            try:
                new_document, to_return = await self.store.modify(change)
            except PreconditionFailed:
                return web.Response(status=HTTPStatus.PRECONDITION_FAILED)
            logger.debug(f"Document changed by {request.method} at '{ptr}', revision {self.store.revision}")

        # serialize the response (the `to_return` object is a Dict/list/scalar, we want to return json)
        resp_text: Optional[str] = json.dumps(to_return) if read_only else None

        res = web.Response(status=HTTPStatus.OK, text=resp_text, content_type="application/json")
        res.headers.add("ETag", f'"{document_etag(new_document)}"')
        return res

    async def _handler_stop(self, _request: web.Request) -> web.Response:
        """
        Route handler for shutting down the server
        """

        self._shutdown_event.set()
        logger.info("Shutdown event triggered...")
        return web.Response(text="Shutting down...")

    def _setup_routes(self) -> None:
        self.app.add_routes(
            [
                web.get("/", self._handler_index),
                web.get(r"/v1/document{path:.*}", self._handler_document_query),
                web.put(r"/v1/document{path:.*}", self._handler_document_query),
                web.delete(r"/v1/document{path:.*}", self._handler_document_query),
                web.patch(r"/v1/document{path:.*}", self._handler_document_query),
                web.post("/stop", self._handler_stop),
            ]
        )


async def load_document(config: ServerConfig) -> Any:
    if config.document is None:
        logger.info("No document file configured, starting with an empty document")
        return {}
    if not config.document.exists():
        raise ConfigError(f"document file '{config.document}' does not exist", "/document")
    logger.info(f"Loading document from '{config.document}' file.")
    return try_to_parse(await readfile(config.document))


def persist_callback(path: Path) -> Any:
    # the file already holds the document the store starts with
    @only_on_real_changes_update(lambda document: document, skip_first=True)
    async def persist(document: Any) -> None:
        logger.debug(f"Writing document to '{path}'")
        await writefile(path, DataFormat.from_path(path).dict_dump(document, indent=4))

    return persist


async def start_server(config: ServerConfig) -> int:
    start_time = time()

    # any errors during initialization are fatal
    try:
        configure_logging(config.logging.level, config.logging.target)
        store = DocumentStore(await load_document(config))
        if config.persist and config.document is not None:
            await store.register_on_change_callback(persist_callback(config.document))
        server = Server(store, config)
    except (ConfigError, DataParsingError, OSError) as e:
        # We caught an error with a pretty error message. Just print it and exit.
        logger.error(e)
        return 1

    try:
        await server.start()
    except OSError as e:
        # fancy error reporting of network binding errors
        logger.error(str(e))
        await server.shutdown()
        return 1

    server.bind_signal_handlers()
    logger.info(f"Server fully initialized and running in {round(time() - start_time, 3)} seconds")

    await server.wait_for_shutdown()

    logger.info("Stopping API service...")
    await server.shutdown()
    logger.info(f"The server run for {round(time() - start_time)} seconds...")
    return server.get_exit_code()


def run_server(config: ServerConfig) -> int:
    return asyncio.run(start_server(config))

