# autoload/api/router/pubsub_push_router.py
from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool

from autoload.api.handler.object_finalize_handler import ObjectFinalizeHandler

PUSH_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE"]

router = APIRouter()


def get_handler(request: Request) -> ObjectFinalizeHandler:
    return request.app.state.handler


@router.api_route("/{path:path}", methods=PUSH_METHODS)
async def pubsub_push(
    request: Request,
    handler: ObjectFinalizeHandler = Depends(get_handler),
) -> Response:
    body = await handler.read_body(request)
    await run_in_threadpool(handler.do_process, body)
    return Response(status_code=200)
