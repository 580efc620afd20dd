from __future__ import annotations

from typing import NamedTuple

LOVELACE = "lovelace"
POLICY_ID_LENGTH = 56


class UnitParts(NamedTuple):
    policy_id: str
    asset_name: str | None


def from_unit(unit: str) -> UnitParts:
    """Split a unit into its policy id and (optional) asset name.

    Args:
        unit: Hex policy id (56 chars) followed by a hex asset name.

    Returns:
        The policy id and the asset name, or ``None`` when the unit has no
        asset name.

    Raises:
        ValueError: If ``unit`` is the lovelace sentinel or too short to
            carry a policy id.
    """
    if unit == LOVELACE:
        raise ValueError("lovelace is not a native asset unit")
    if len(unit) < POLICY_ID_LENGTH:
        raise ValueError(
            f"Unit {unit!r} is shorter than a {POLICY_ID_LENGTH}-char policy id"
        )
    return UnitParts(unit[:POLICY_ID_LENGTH], unit[POLICY_ID_LENGTH:] or None)


def to_unit(policy_id: str, asset_name: str | None = None) -> str:
    return policy_id + (asset_name or "")


def unit_from_kupo_key(key: str) -> str:
    """Convert an indexer asset key (``policy.name`` or ``policy``) to a unit."""
    return key.replace(".", "")
