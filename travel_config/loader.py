"""
Policy Loader (``travel_config.loader``).

Responsibility
--------------
Loads a reimbursement policy YAML file and parses it into the engines'
``ReimbursementPolicy``.  Callers should go through
``travel_config.get_active_policy()`` rather than this module.

Architecture position
---------------------
**Config layer**.  Sits above ``travel_engines``: it builds the engine
policy objects, the engines never import it.

Invariants enforced
-------------------
* Decimal fields must be written as strings or integers.  YAML floats
  are rejected so no binary approximation enters the tier table.
* Every parsed policy is frozen and carries the SHA-256 checksum of its
  source data.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing or ill-typed fields  -> ``InvalidPolicyError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from travel_engines.out_of_pocket import OutOfPocketSchedule, OutOfPocketTier
from travel_engines.policy import MILEAGE_REIMBURSEMENT_RATE, ReimbursementPolicy
from travel_kernel.exceptions import InvalidPolicyError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        InvalidPolicyError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InvalidPolicyError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def parse_decimal(value: Any, field: str, policy_id: str | None = None) -> Decimal:
    """Parse an exact Decimal from a YAML string or integer."""
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidPolicyError(
            f"{field} must be written as a quoted decimal string, got {value!r}",
            policy_id,
        )
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, str)):
        try:
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidPolicyError(f"{field} is not a decimal: {value!r}", policy_id) from None
        if not parsed.is_finite():
            raise InvalidPolicyError(f"{field} must be finite: {value!r}", policy_id)
        return parsed
    raise InvalidPolicyError(f"{field} has unsupported type {type(value).__name__}", policy_id)


def parse_tier(data: dict[str, Any], index: int, policy_id: str | None = None) -> OutOfPocketTier:
    """Parse one ``{below, rate, offset}`` tier."""
    if not isinstance(data, dict):
        raise InvalidPolicyError(f"tiers[{index}] must be a mapping", policy_id)
    if "rate" not in data:
        raise InvalidPolicyError(f"tiers[{index}] is missing 'rate'", policy_id)
    below = data.get("below")
    return OutOfPocketTier(
        below=parse_decimal(below, f"tiers[{index}].below", policy_id) if below is not None else None,
        rate=parse_decimal(data["rate"], f"tiers[{index}].rate", policy_id),
        offset=parse_decimal(data.get("offset", "0"), f"tiers[{index}].offset", policy_id),
    )


def parse_policy(data: dict[str, Any]) -> ReimbursementPolicy:
    """
    Parse a ``ReimbursementPolicy`` from a dict.

    Raises:
        InvalidPolicyError: if a required field is missing or ill-typed,
            or the tier schedule is malformed.
    """
    policy_id = data.get("policy_id")
    if not policy_id or not isinstance(policy_id, str):
        raise InvalidPolicyError("policy_id is required")

    tiers_data = data.get("tiers")
    if not isinstance(tiers_data, list) or not tiers_data:
        raise InvalidPolicyError("tiers must be a non-empty list", policy_id)

    include = data.get("include_mileage_reimbursement", False)
    if not isinstance(include, bool):
        raise InvalidPolicyError("include_mileage_reimbursement must be true or false", policy_id)

    version = data.get("version", 1)
    if isinstance(version, bool) or not isinstance(version, int):
        raise InvalidPolicyError("version must be an integer", policy_id)

    try:
        schedule = OutOfPocketSchedule(tiers=tuple(
            parse_tier(tier, i, policy_id) for i, tier in enumerate(tiers_data)
        ))
    except InvalidPolicyError as e:
        if e.policy_id is not None:
            raise
        raise InvalidPolicyError(e.reason, policy_id) from e

    return ReimbursementPolicy(
        policy_id=policy_id,
        version=version,
        mileage_rate=parse_decimal(
            data.get("mileage_rate", str(MILEAGE_REIMBURSEMENT_RATE)), "mileage_rate", policy_id,
        ),
        include_mileage_reimbursement=include,
        rounding=str(data.get("rounding", "ROUND_HALF_EVEN")),
        schedule=schedule,
        checksum=compute_checksum(data),
    )


def load_policy(path: Path) -> ReimbursementPolicy:
    """Load and parse a policy YAML file."""
    return parse_policy(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
