# app/chain/abi.py
"""
Loads the ElectionSystem ABI and deployment table from its Truffle build
artifact (build/contracts/ElectionSystem.json).

The artifact is read lazily by ContractBinding rather than at import, so a
missing `truffle migrate` surfaces as an initialization failure on the first
request instead of a crash at startup.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


def load_artifact(path: Path) -> Dict[str, Any]:
    """
    Load a contract build artifact.

    Returns:
        The artifact as a dict with at least an "abi" key.

    Raises:
        FileNotFoundError if the artifact doesn't exist.
        ValueError if it has no ABI.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"Contract artifact not found: {path}\n"
            f"Run: truffle compile && truffle migrate"
        )

    with path.open() as f:
        data = json.load(f)

    if not data.get("abi"):
        raise ValueError(f"No 'abi' key in {path}")

    return data


def deployed_address(artifact: Dict[str, Any], network_id) -> Optional[str]:
    """Address recorded for `network_id` in the artifact's networks table."""
    entry = (artifact.get("networks") or {}).get(str(network_id))
    if not entry:
        return None
    return entry.get("address") or None


def _fn(name, inputs, outputs, mutability):
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
        "stateMutability": mutability,
    }


# Minimal ABI for the methods the gateway calls. Used only when the artifact
# is absent and CONTRACT_ADDRESS points at the deployment directly.
ELECTION_ABI: List[Dict[str, Any]] = [
    _fn(
        "registerUser",
        [
            ("_name", "string"),
            ("_dateOfBirth", "string"),
            ("_parentName", "string"),
            ("_email", "string"),
            ("_mobileNo", "string"),
            ("_password", "string"),
            ("_cnicNumber", "string"),
        ],
        [],
        "nonpayable",
    ),
    _fn("login", [("_email", "string"), ("_password", "string")], [], "nonpayable"),
    _fn("logout", [("_cnicNumber", "string")], [], "nonpayable"),
    _fn(
        "getUserDetailsByEmail",
        [("_email", "string")],
        [
            ("name", "string"),
            ("dateOfBirth", "string"),
            ("parentName", "string"),
            ("email", "string"),
            ("mobileNo", "string"),
            ("cnicNumber", "string"),
            ("isLoggedIn", "bool"),
        ],
        "view",
    ),
    _fn("addCandidate", [("_name", "string")], [], "nonpayable"),
    _fn("vote", [("_candidateName", "string")], [], "nonpayable"),
    _fn(
        "getResults",
        [],
        [("", "uint256"), ("", "uint256"), ("", "string")],
        "view",
    ),
    _fn(
        "getCandidate",
        [("_candidateId", "uint256")],
        [("", "address"), ("", "uint256"), ("", "string")],
        "view",
    ),
    _fn("getTotalCandidates", [], [("", "uint256")], "view"),
]
