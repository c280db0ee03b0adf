"""
Configuration constants for the ircpipe client

Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Seconds allowed for the TCP connect before connect() fails with ConnectError
CONNECT_TIMEOUT = _get_env_float("CONNECT_TIMEOUT", 10.0)

# Seconds close() waits for the transport to finish closing
CLOSE_TIMEOUT = _get_env_float("CLOSE_TIMEOUT", 5.0)

# StreamReader buffer limit; a longer inbound line is skipped
READ_LIMIT = _get_env_int("READ_LIMIT", 64 * 1024)

# Wire encoding for both directions
WIRE_ENCODING = "utf-8"

# Appended to every outbound command
LINE_TERMINATOR = "\n"

# Environment variable names read by ClientCfg.from_env and the CLI
ENV_NETWORK = "IRCPIPE_NETWORK"
ENV_NICK = "IRCPIPE_NICK"
ENV_REALNAME = "IRCPIPE_REALNAME"
ENV_CHANNELS = "IRCPIPE_CHANNELS"
