"""Build the configured gateway."""

from __future__ import annotations

from typing import Optional

import requests

from peervisit.config import GatewayConfig
from peervisit.domain.repositories import DatabaseManager

from .base import PersistenceGateway
from .local import LocalGateway
from .remote import RemoteGateway


def build_gateway(
    cfg: GatewayConfig,
    http: Optional[requests.Session] = None,
) -> PersistenceGateway:
    """
    Create the gateway selected by cfg.mode.

    Args:
        cfg: Gateway configuration (mode, remote_url, timeout, db_url)
        http: Optional HTTP session for the remote store

    Returns:
        LocalGateway in local mode, RemoteGateway with a local fallback in remote mode
    """
    local = LocalGateway(DatabaseManager(cfg.db_url))
    if cfg.mode == "local":
        return local
    if cfg.mode == "remote":
        if not cfg.remote_url:
            raise ValueError("Remote gateway requires remote_url")
        return RemoteGateway(cfg.remote_url, fallback=local, timeout=cfg.timeout, http=http)
    raise ValueError(f"Unknown gateway mode: {cfg.mode}")
