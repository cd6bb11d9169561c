"""
travel_config -- single public entrypoint for reimbursement policy.

Responsibility:
    Provides the ONLY way to obtain a reimbursement policy at runtime
    through ``get_active_policy()``.  Returns a frozen
    ``ReimbursementPolicy`` that callers pass to the engines explicitly.

Architecture position:
    Configuration -- YAML-driven policy, validated on load.  This package
    sits above ``travel_engines``; the engines MUST NEVER import it.

Failure modes:
    - ``FileNotFoundError`` -- the requested policy file does not exist.
    - ``yaml.YAMLError`` -- the policy file is not valid YAML.
    - ``InvalidPolicyError`` -- schema or tier-table validation failed.

Audit relevance:
    Every successful ``get_active_policy()`` call emits a
    ``TRAVEL_POLICY_TRACE`` log entry with the policy id, version and
    checksum, tying each computation to the policy that governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from travel_config.loader import load_policy
from travel_engines.policy import DEFAULT_POLICY, ReimbursementPolicy

_logger = logging.getLogger("travel_kernel.config")

DEFAULT_POLICY_PATH = Path(__file__).parent / "policies" / "default.yaml"


def get_active_policy(path: Path | str | None = None) -> ReimbursementPolicy:
    """Load the reimbursement policy from ``path`` (default policy file if None).

    Raises:
        FileNotFoundError: If the policy file does not exist.
        InvalidPolicyError: If the policy fails validation.
    """
    policy_path = Path(path) if path is not None else DEFAULT_POLICY_PATH
    policy = load_policy(policy_path)

    _logger.info(
        "TRAVEL_POLICY_TRACE",
        extra={
            "trace_type": "TRAVEL_POLICY_TRACE",
            "policy_id": policy.policy_id,
            "policy_version": policy.version,
            "checksum": policy.checksum,
            "rounding": policy.rounding,
            "tier_count": len(policy.schedule.tiers),
            "include_mileage_reimbursement": policy.include_mileage_reimbursement,
            "source": str(policy_path),
        },
    )
    return policy


def default_policy() -> ReimbursementPolicy:
    """The built-in policy, without touching the filesystem."""
    return DEFAULT_POLICY


__all__ = [
    "DEFAULT_POLICY_PATH",
    "default_policy",
    "get_active_policy",
]
