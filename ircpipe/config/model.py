from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import ENV_NETWORK, ENV_NICK, ENV_REALNAME


class ClientCfg(BaseModel):
    """Immutable connection settings for one client.

    Attributes:
        network: Server address as ``host:port``.
        nick: Nickname sent with NICK and reused as the USER name.
        realname: Real name for USER; defaults to the nickname.
    """

    model_config = ConfigDict(frozen=True)

    network: str = Field(min_length=3)
    nick: str = Field(min_length=1)
    realname: str | None = None

    @field_validator("network")
    @classmethod
    def validate_network(cls, v: str) -> str:
        """Require ``host:port`` with a numeric port in range."""
        v = v.strip()
        host, sep, port = v.rpartition(":")
        if not sep or not host:
            raise ValueError("network must look like host:port")
        if not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"invalid port in network address: {port!r}")
        return v

    @field_validator("nick")
    @classmethod
    def validate_nick(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("nick must not be empty")
        if any(c in v for c in " \r\n:") or v.startswith("#"):
            raise ValueError(f"nick contains characters not allowed on the wire: {v!r}")
        return v

    @property
    def host(self) -> str:
        # IPv6 literals arrive bracketed: [::1]:6667
        return self.network.rpartition(":")[0].strip("[]")

    @property
    def port(self) -> int:
        return int(self.network.rpartition(":")[2])

    @property
    def display_name(self) -> str:
        return self.realname or self.nick

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ClientCfg:
        """Build a config from ``IRCPIPE_*`` environment variables.

        Raises:
            pydantic.ValidationError: A variable is missing or invalid.
        """
        env = os.environ if env is None else env
        data: dict[str, Any] = {
            "network": env.get(ENV_NETWORK, ""),
            "nick": env.get(ENV_NICK, ""),
        }
        if env.get(ENV_REALNAME):
            data["realname"] = env[ENV_REALNAME]
        return cls(**data)
