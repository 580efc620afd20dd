"""Cardano ledger-state provider backed by Kupo and Ogmios."""

from __future__ import annotations

from .domain import (
    Credential,
    Delegation,
    EvalRedeemer,
    ExUnits,
    OutRef,
    ProtocolParameters,
    Script,
    ScriptType,
    UTxO,
)
from .errors import AmbiguousUnitError, ErrorKind, KupmiosError
from .provider import BaseProvider, KupmiosProvider
from .settings import KupmiosSettings

__all__ = [
    "AmbiguousUnitError",
    "BaseProvider",
    "Credential",
    "Delegation",
    "ErrorKind",
    "EvalRedeemer",
    "ExUnits",
    "KupmiosError",
    "KupmiosProvider",
    "KupmiosSettings",
    "OutRef",
    "ProtocolParameters",
    "Script",
    "ScriptType",
    "UTxO",
]
