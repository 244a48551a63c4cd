"""Storage backends for word cards and settings."""

from .backends import (
    JsonFileSettingsStorage,
    JsonFileWordBackend,
    LocalWordBackend,
    MemorySettingsStorage,
    MemoryWordBackend,
    RemoteWordBackend,
    SettingsStorage,
)
from .status import RemoteStatusPusher, StatusPusher

__all__ = [
    "LocalWordBackend",
    "MemoryWordBackend",
    "JsonFileWordBackend",
    "RemoteWordBackend",
    "SettingsStorage",
    "MemorySettingsStorage",
    "JsonFileSettingsStorage",
    "StatusPusher",
    "RemoteStatusPusher",
]
