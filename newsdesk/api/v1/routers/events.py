import asyncio

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from newsdesk.api import deps
from newsdesk.services import upload_progress

router = APIRouter(tags=["events"])


@router.get("/events", summary="Stream upload progress (SSE)")
async def stream_upload_progress(identity: deps.Identity = Depends(deps.get_identity)):
    channel = upload_progress.channel_for_account(identity.account_id)
    pubsub = await upload_progress.subscribe(channel)

    async def event_generator():
        try:
            yield ": connected\n\n"
            while True:
                message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=15.0)
                if message and message.get("data"):
                    yield "event: progress\n"
                    yield f"data: {message['data']}\n\n"
                else:
                    yield ": keep-alive\n\n"
                await asyncio.sleep(0)
        finally:
            await upload_progress.unsubscribe(pubsub, channel)

    headers = {"Cache-Control": "no-cache", "Connection": "keep-alive"}
    return StreamingResponse(event_generator(), media_type="text/event-stream", headers=headers)
