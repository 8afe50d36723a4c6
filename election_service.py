# app/election_service.py
"""
ElectionGateway: every contract interaction the HTTP layer needs.

Pattern per operation: check inputs -> ensure contract -> (writes) pick signer
-> call/transact -> normalize. No retries, no caching beyond the contract
handle; the ledger is the source of truth.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from web3 import Web3

import config
from chain.accounts import AccountSelector
from chain.binding import ContractBinding
from chain.candidates import CandidateLister, candidate_record
from chain.normalize import normalize
from errors import UpstreamReadError, UpstreamWriteError, ValidationError

logger = logging.getLogger(__name__)


def require(**fields):
    """Raise ValidationError unless every field is a non-blank value."""
    missing = [
        name
        for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError.for_fields(missing)


def _named(param, value):
    components = param.get("components")
    if param.get("type") == "tuple" and components and isinstance(value, (list, tuple)):
        return {
            (c.get("name") or str(i)): _named(c, v)
            for i, (c, v) in enumerate(zip(components, value))
        }
    return value


def named_outputs(fn, result) -> Any:
    """Key a positional result by the output names in the function's ABI.

    A single struct output is keyed by its component names instead.
    """
    outputs = (getattr(fn, "abi", None) or {}).get("outputs") or []
    if len(outputs) == 1:
        return _named(outputs[0], result)
    if not outputs or not isinstance(result, (list, tuple)):
        return result
    return {
        (out.get("name") or str(i)): _named(out, value)
        for i, (out, value) in enumerate(zip(outputs, result))
    }


class ElectionGateway:
    def __init__(self, binding: ContractBinding, gas_limit: int = config.GAS_LIMIT):
        self.binding = binding
        self.accounts = AccountSelector(binding.w3)
        self.gas_limit = gas_limit

    @classmethod
    def from_config(cls) -> "ElectionGateway":
        binding = ContractBinding(
            rpc_url=config.RPC_URL,
            artifact_path=config.CONTRACT_ARTIFACT_PATH,
            address=config.CONTRACT_ADDRESS,
        )
        return cls(binding, gas_limit=config.GAS_LIMIT)

    # ────────────────────────────────────────────────────────────
    # Helpers
    # ────────────────────────────────────────────────────────────

    async def _send(self, method: str, *args, failure: str) -> str:
        contract = await self.binding.ensure_initialized()
        sender = await self.accounts.select()
        try:
            fn = getattr(contract.functions, method)(*args)
            tx_hash = await fn.transact({"from": sender, "gas": self.gas_limit})
        except Exception as e:
            raise UpstreamWriteError(failure, details=e) from e

        if not isinstance(tx_hash, str):
            tx_hash = Web3.to_hex(tx_hash)
        logger.info("%s submitted: from=%s tx=%s", method, sender, tx_hash)
        return tx_hash

    async def _call(self, method: str, *args, failure: str, named: bool = False):
        contract = await self.binding.ensure_initialized()
        try:
            fn = getattr(contract.functions, method)(*args)
            result = await fn.call()
        except Exception as e:
            raise UpstreamReadError(failure, details=e) from e
        return named_outputs(fn, result) if named else result

    # ────────────────────────────────────────────────────────────
    # Writes
    # ────────────────────────────────────────────────────────────

    async def register_user(
        self, name, date_of_birth, parent_name, email, mobile_no, password, cnic_number
    ) -> str:
        require(
            name=name,
            dateOfBirth=date_of_birth,
            parentName=parent_name,
            email=email,
            mobileNo=mobile_no,
            password=password,
            cnicNumber=cnic_number,
        )
        return await self._send(
            "registerUser",
            name,
            date_of_birth,
            parent_name,
            email,
            mobile_no,
            password,
            cnic_number,
            failure="Failed to register user",
        )

    async def login(self, email, password) -> str:
        require(email=email, password=password)
        return await self._send("login", email, password, failure="Failed to log in")

    async def logout(self, cnic_number) -> str:
        require(cnicNumber=cnic_number)
        return await self._send("logout", cnic_number, failure="Failed to log out")

    async def add_candidate(self, name) -> str:
        require(name=name)
        return await self._send("addCandidate", name, failure="Failed to add candidate")

    async def vote(self, candidate_name) -> str:
        require(candidateName=candidate_name)
        return await self._send(
            "vote", candidate_name, failure="Failed to cast vote. Please try again later."
        )

    # ────────────────────────────────────────────────────────────
    # Reads
    # ────────────────────────────────────────────────────────────

    async def get_user_details_by_email(self, email) -> Dict[str, Any]:
        require(email=email)
        details = await self._call(
            "getUserDetailsByEmail", email, failure="Failed to fetch user details", named=True
        )
        details = normalize(details)
        if not isinstance(details, dict):
            raise UpstreamReadError(
                "Failed to fetch user details",
                details=f"unexpected result shape: {type(details).__name__}",
            )
        return details

    async def get_results(self) -> Dict[str, Any]:
        winner = await self._call("getResults", failure="Failed to fetch election results")
        # (id, voteCount, name)
        return normalize({"id": winner[0], "voteCount": winner[1], "name": winner[2]})

    async def get_candidate(self, candidate_id: int) -> Dict[str, Any]:
        if candidate_id is None or candidate_id < 1:
            raise ValidationError("Candidate id must be a positive integer.")
        raw = await self._call(
            "getCandidate",
            candidate_id,
            failure="An error occurred while fetching candidate details",
        )
        return normalize(candidate_record(candidate_id, raw))

    async def list_candidates(self) -> List[Dict[str, Any]]:
        contract = await self.binding.ensure_initialized()
        try:
            candidates = await CandidateLister(contract).list()
        except UpstreamReadError as e:
            raise UpstreamReadError(
                "An error occurred while fetching candidates",
                details=e.details if e.index is None else f"candidate {e.index}: {e.details}",
                index=e.index,
            ) from e
        return normalize(candidates)

