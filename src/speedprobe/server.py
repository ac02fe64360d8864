from __future__ import annotations

import logging

from aiohttp import web

from .config import SizeConfig, resolve_download_size
from .constants import CONTENT_TYPE_OCTET, MSG_INTERNAL_ERROR, MSG_TOO_LARGE, MSG_UPLOAD_FAILED
from .download import DownloadGenerator
from .session import TerminalState, TransferSession
from .transport import RequestSource, ResponseSink
from .upload import UploadAccountant, UploadReport

logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", SizeConfig)

# nginx's code for a client that went away before the reply
STATUS_CLIENT_CLOSED = 499


async def preflight(request: web.Request) -> web.Response:
    return web.Response(status=204)


async def download(request: web.Request) -> web.StreamResponse:
    try:
        config = request.app[CONFIG_KEY]
        requested = request.query.get("size", "")
        size = resolve_download_size(requested, config)

        response = web.StreamResponse(
            status=200,
            headers={"Cache-Control": "no-store"},
        )
        response.content_type = CONTENT_TYPE_OCTET
        response.content_length = size
        await response.prepare(request)

        session = TransferSession(route="/download", total_bytes=size)
        session.log_start(requested=requested, total=size)
    except Exception as e:
        logger.warning("/download failed reason=%s", e)
        return web.json_response({"error": MSG_INTERNAL_ERROR}, status=500)

    await DownloadGenerator(ResponseSink(request, response), session).run()
    return response


async def upload(request: web.Request) -> web.StreamResponse:
    try:
        config = request.app[CONFIG_KEY]
        session = TransferSession(route="/upload")
        session.log_start()
        source = RequestSource(request)
    except Exception as e:
        logger.error("/upload failed reason=%s", e)
        return web.json_response({"error": MSG_INTERNAL_ERROR}, status=500)

    report = await UploadAccountant(session, limit=config.max_upload).run(source)
    if report.state is TerminalState.OVERSIZED:
        return await _reject_oversized(request, source, report)
    return _reply(report)


async def _reject_oversized(
    request: web.Request, source: RequestSource, report: UploadReport
) -> web.StreamResponse:
    response = web.json_response({"message": MSG_TOO_LARGE, "max": report.limit}, status=413)
    response.force_close()
    try:
        await response.prepare(request)
        await response.write_eof()
    except ConnectionError as e:
        logger.debug("/upload reply not delivered: id=%s err=%s", report.id, e)
    # the rest of the body is never read
    source.destroy()
    return response


def _reply(report: UploadReport) -> web.Response:
    if report.state is TerminalState.COMPLETED:
        return web.json_response({"bytes": report.bytes, "millis": report.millis})
    if report.state is TerminalState.ERRORED:
        return web.json_response({"message": MSG_UPLOAD_FAILED}, status=500)
    response = web.Response(status=STATUS_CLIENT_CLOSED)
    response.force_close()
    return response


def create_app(config: SizeConfig | None = None, base_path: str = "") -> web.Application:
    app = web.Application()
    app[CONFIG_KEY] = config if config is not None else SizeConfig.from_env()

    prefix = base_path.rstrip("/")
    app.router.add_route("OPTIONS", f"{prefix}/download", preflight)
    app.router.add_get(f"{prefix}/download", download, allow_head=False)
    app.router.add_route("OPTIONS", f"{prefix}/upload", preflight)
    app.router.add_post(f"{prefix}/upload", upload)
    return app


def serve(host: str, port: int, config: SizeConfig, base_path: str = "") -> None:
    logger.info(
        "listening on %s:%d; default=%d max_download=%d max_upload=%d",
        host,
        port,
        config.default_size,
        config.max_download,
        config.max_upload,
    )
    web.run_app(create_app(config, base_path), host=host, port=port, print=None)
