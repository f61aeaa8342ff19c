from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from newsdesk.utils.redis_client import get_redis_client, redis_key


CHANNEL_PREFIX = "upload-progress"
logger = logging.getLogger(__name__)


def channel_for_account(account_id: str) -> str:
    return redis_key(CHANNEL_PREFIX, account_id)


def upload_event(file_name: str, loaded: int, total: int, elapsed_seconds: float) -> dict[str, Any]:
    """Progress payload for the storage phase: percent, MB/s and seconds remaining."""
    mb_loaded = loaded / 1024 / 1024
    speed = mb_loaded / elapsed_seconds if elapsed_seconds else 0.0
    pct = round(loaded / total * 100) if total else 0
    eta = (total / 1024 / 1024 - mb_loaded) / speed if speed > 0 else 0
    return {
        "file": file_name,
        "phase": "storage",
        "pct": pct,
        "speed": f"{speed:.2f}",
        "eta": round(eta),
    }


async def publish_progress(account_id: str, payload: dict[str, Any]) -> None:
    try:
        redis = get_redis_client()
        await redis.publish(channel_for_account(account_id), json.dumps(payload))
    except RedisError as exc:
        # Progress is advisory; the upload itself carries on.
        logger.warning("Upload progress publish failed: %s", exc)


async def subscribe(channel: str) -> PubSub:
    redis = get_redis_client()
    pubsub = redis.pubsub()
    await pubsub.subscribe(channel)
    return pubsub


async def unsubscribe(pubsub: PubSub, channel: str) -> None:
    try:
        await asyncio.wait_for(pubsub.unsubscribe(channel), timeout=2.0)
    except (RedisError, TimeoutError, asyncio.TimeoutError) as exc:
        logger.warning("Upload progress unsubscribe failed: %s", exc)
    finally:
        try:
            await asyncio.wait_for(pubsub.close(), timeout=2.0)
        except (RedisError, TimeoutError, asyncio.TimeoutError) as exc:
            logger.warning("Upload progress pubsub close failed: %s", exc)
