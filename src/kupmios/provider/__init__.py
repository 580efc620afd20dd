from __future__ import annotations

from .base import BaseProvider
from .kupmios import KupmiosProvider

__all__ = ["BaseProvider", "KupmiosProvider"]
