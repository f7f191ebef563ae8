"""
Realtime change notifications for the dashboard

Writes to jobs and invoices publish a JSON event on a Redis channel
(`jobs_changes`, `invoices_changes`); the websocket endpoint relays those
events to connected browsers. Publishing is fail-open: a Redis outage
never breaks the write that triggered it.
"""

import json
import logging
import os
from typing import Optional

import redis
import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from . import auth, config
from .database import get_db
from .models import User
from .policies import visible_client_ids

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])

REALTIME_TABLES = ("jobs", "invoices")

redis_client: Optional[redis.Redis] = None


def get_redis_url() -> str:
    redis_url = os.getenv("REDIS_URL")
    if redis_url:
        return redis_url
    scheme = "rediss" if os.getenv("REDIS_SSL", "false").lower() == "true" else "redis"
    password = os.getenv("REDIS_PASSWORD")
    credentials = f":{password}@" if password else ""
    host = os.getenv("REDIS_HOST", "localhost")
    port = os.getenv("REDIS_PORT", "6379")
    db = os.getenv("REDIS_DB", "0")
    return f"{scheme}://{credentials}{host}:{port}/{db}"


def get_redis_client() -> redis.Redis:
    """Get or create the shared Redis client"""
    global redis_client
    if redis_client is None:
        logger.info("🔄 Initializing Redis connection for change notifications...")
        redis_client = redis.from_url(
            get_redis_url(),
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
    return redis_client


def channel_name(table: str) -> str:
    return f"{table}_changes"


def serialize_row(row) -> Optional[dict]:
    """Column values of an ORM row as JSON-ready data"""
    if row is None:
        return None
    return jsonable_encoder({c.key: getattr(row, c.key) for c in row.__table__.columns})


def publish_change(table: str, event_type: str, new: Optional[dict], old: Optional[dict]) -> bool:
    """
    Publish an INSERT/UPDATE/DELETE event for a table.
    Returns False (and logs) when publishing is disabled or Redis is unreachable.
    """
    if not config.REALTIME_ENABLED or table not in REALTIME_TABLES:
        return False

    payload = json.dumps({"table": table, "eventType": event_type, "new": new, "old": old})
    try:
        get_redis_client().publish(channel_name(table), payload)
        return True
    except redis.RedisError as e:
        logger.warning(f"⚠️ Could not publish {event_type} on {table}: {e}")
        return False




def get_async_redis_client() -> aioredis.Redis:
    return aioredis.from_url(get_redis_url(), decode_responses=True)


def event_visible(raw: str, client_ids: Optional[set]) -> bool:
    """
    Whether a published event may be relayed to a subscriber.
    `client_ids` None means the subscriber sees every row; otherwise the
    event's row (new or old image) must belong to one of those clients.
    """
    if client_ids is None:
        return True
    try:
        event = json.loads(raw)
    except ValueError:
        return False
    rows = [event.get("new"), event.get("old")]
    return any(isinstance(row, dict) and row.get("client_id") in client_ids for row in rows)


async def authenticate_subscriber(db: Session, token: Optional[str]) -> Optional[User]:
    """Profile for a websocket token, or None when it cannot be trusted"""
    if not token:
        return None
    try:
        claims = await auth.verify_firebase_token(token)
    except HTTPException as e:
        logger.warning(f"⚠️ Realtime subscriber rejected: {e.detail}")
        return None
    return db.query(User).filter(User.id == claims["sub"]).first()


@router.websocket("/realtime/{table}")
async def relay_changes(
    websocket: WebSocket,
    table: str,
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Stream change events for a table to the browser.

    The Firebase ID token goes in the `token` query parameter since browsers
    cannot set headers on a websocket handshake. Advertisers only receive
    events for rows of their own client.
    """
    if table not in REALTIME_TABLES:
        await websocket.close(code=1008)
        return

    user = await authenticate_subscriber(db, token)
    if user is None:
        await websocket.close(code=1008)
        return
    client_ids = visible_client_ids(db, user)

    await websocket.accept()
    client = get_async_redis_client()
    pubsub = client.pubsub()
    await pubsub.subscribe(channel_name(table))
    logger.info(f"📡 {user.email} ({user.role}) subscribed to {channel_name(table)}")
    try:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue
            if not event_visible(message["data"], client_ids):
                continue
            await websocket.send_text(message["data"])
        await websocket.close()
    except WebSocketDisconnect:
        logger.info(f"📡 {user.email} left {channel_name(table)}")
    except redis.RedisError as e:
        logger.error(f"❌ Realtime relay for {table} failed: {e}")
        await websocket.close(code=1011)
    finally:
        await pubsub.unsubscribe(channel_name(table))
        await pubsub.aclose()
        await client.aclose()
