#!/usr/bin/env python3
"""
Command-line runner: connect, join channels and log what arrives.
"""

import asyncio
import logging
import os
import sys

from pydantic import ValidationError

from .config import ClientCfg
from .constants import ENV_CHANNELS
from .errors import ConnectError, QueueClosed, TransportError, log_error
from .irc import Channel, connect
from .logging_config import configure_logging
from .logs.logger import logger


def channels_from_env(env=None) -> list[str]:
    env = os.environ if env is None else env
    raw = env.get(ENV_CHANNELS, "")
    return [name.strip() for name in raw.split(",") if name.strip()]


async def follow_topic(channel: Channel):
    try:
        while True:
            topic = await channel.topic.wait_for_update()
            logger.log_event("app", "topic", channel=channel.name, topic=topic)
    except QueueClosed:
        return


async def follow_text(channel: Channel):
    async for text in channel:
        logger.log_event("app", "text", channel=channel.name, text=text)


async def run(cfg: ClientCfg, channel_names: list[str]):
    """Run one session until the server disconnects or the task is cancelled."""
    async with await connect(cfg) as client:
        followers = []
        for name in channel_names:
            channel = client.join(name)
            followers.append(asyncio.create_task(follow_topic(channel)))
            followers.append(asyncio.create_task(follow_text(channel)))
        try:
            await client.wait_closed()
        finally:
            for task in followers:
                task.cancel()
            await asyncio.gather(*followers, return_exceptions=True)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    configure_logging()
    try:
        cfg = ClientCfg.from_env()
    except ValidationError as e:
        logger.log_event("app", "config_invalid", level=logging.ERROR, error=str(e))
        return 2

    if argv and argv[0] == "--check-config":
        logger.log_event("app", "config_ok", network=cfg.network, nick=cfg.nick)
        return 0

    logger.log_event("app", "start", network=cfg.network, nick=cfg.nick)
    try:
        asyncio.run(run(cfg, channels_from_env()))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
    except (ConnectError, TransportError) as e:
        log_error("Session ended", e)
        return 1
    finally:
        logger.log_event("app", "shutdown")
    return 0


if __name__ == "__main__":
    sys.exit(main())
