"""Persistence gateway: remote HTTP store with local fallback."""

from .base import PersistenceGateway, RecordKind
from .factory import build_gateway
from .local import LocalGateway
from .remote import RemoteGateway

__all__ = [
    "PersistenceGateway",
    "RecordKind",
    "LocalGateway",
    "RemoteGateway",
    "build_gateway",
]
