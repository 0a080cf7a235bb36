"""Mattermost websocket listener — feeds posted events to the Dispatcher."""

import sys

import aiohttp

from macobot.adapters.mattermost.client import MattermostClient
from macobot.adapters.mattermost.models import to_incoming
from macobot.domain.dispatcher import Dispatcher


def _log(msg: str):
    print(msg, file=sys.stderr)


async def dispatch_frames(ws, dispatcher: Dispatcher) -> int:
    """Hand every text frame to the dispatcher, one at a time.

    Returns the number of frames seen; stops when the socket closes or errors.
    """
    seen = 0
    async for frame in ws:
        if frame.type == aiohttp.WSMsgType.TEXT:
            seen += 1
            await dispatcher.handle(to_incoming(frame.data))
        elif frame.type in (aiohttp.WSMsgType.CLOSED, aiohttp.WSMsgType.ERROR):
            break
    return seen


async def listen(client: MattermostClient, dispatcher: Dispatcher):
    """Listen on the Mattermost event websocket until it closes."""
    ws = await client.connect_websocket()
    _log(f"[mattermost] listening on {client.websocket_url}")
    try:
        await dispatch_frames(ws, dispatcher)
    finally:
        await ws.close()
        _log("[mattermost] websocket closed")
