"""Client configuration."""

from .model import ClientCfg  # noqa: F401

__all__ = ["ClientCfg"]
