"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .provider.kupmios import KupmiosProvider
from .settings import KupmiosSettings


@dataclass
class AppState:
    """Settings, logger and provider shared by the CLI commands."""

    settings: KupmiosSettings
    logger: logging.Logger
    provider: KupmiosProvider
