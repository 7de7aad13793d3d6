from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from order_webhook.service import WebhookService

router = APIRouter()


def get_webhook_service(request: Request) -> WebhookService:
    return request.app.state.webhook_service


@router.get("/health")
def health():
    return {"status": "ok"}


async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    service: WebhookService = Depends(get_webhook_service),
):
    # Signatures cover the exact bytes sent, never the parsed JSON
    payload = await request.body()

    result = await run_in_threadpool(service.handle, payload, stripe_signature)

    if result.media_type == "application/json":
        return JSONResponse(result.body, status_code=result.status_code)
    return PlainTextResponse(result.body, status_code=result.status_code)
