# app/chain/binding.py
"""
The one shared handle to the deployed ElectionSystem contract.

Nothing touches the node until the first request calls ensure_initialized().
That call resolves the network id, finds the deployment for it and builds the
contract object; every later call returns the cached contract. Concurrent
first callers share a single in-flight initialization.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from errors import InitializationError
from .abi import ELECTION_ABI, deployed_address, load_artifact

logger = logging.getLogger(__name__)


class ContractBinding:
    def __init__(
        self,
        rpc_url: Optional[str] = None,
        artifact_path: Optional[Path] = None,
        address: Optional[str] = None,
        w3: Any = None,
    ):
        if w3 is None:
            if not rpc_url:
                raise ValueError("rpc_url or w3 is required")
            w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self.w3 = w3
        self.artifact_path = artifact_path
        self.address_override = address or None

        self.network_id: Optional[str] = None
        self.address: Optional[str] = None
        self.abi = None
        self.contract = None
        self._pending: Optional[asyncio.Future] = None

    @property
    def initialized(self) -> bool:
        return self.contract is not None

    async def ensure_initialized(self):
        if self.contract is not None:
            return self.contract

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._initialize())
            self._pending.add_done_callback(self._forget_failed)

        # shield: a disconnecting client must not cancel the shared attempt
        return await asyncio.shield(self._pending)

    def _forget_failed(self, task):
        # a failed attempt is not cached, even if nobody was left awaiting it
        if task.cancelled() or task.exception() is not None:
            if self._pending is task:
                self._pending = None

    def _load_abi(self):
        if self.artifact_path is None:
            return None, ELECTION_ABI
        try:
            artifact = load_artifact(self.artifact_path)
        except FileNotFoundError as e:
            if self.address_override:
                logger.warning("%s; using built-in ElectionSystem ABI", e)
                return None, ELECTION_ABI
            raise InitializationError(details=e) from e
        except (OSError, ValueError) as e:
            raise InitializationError(details=e) from e
        return artifact, artifact["abi"]

    async def _initialize(self):
        artifact, abi = self._load_abi()

        try:
            network_id = str(await self.w3.net.version)
        except Exception as e:
            raise InitializationError(details=e) from e

        address = self.address_override
        if not address and artifact is not None:
            address = deployed_address(artifact, network_id)
        if not address:
            raise InitializationError(
                details=f"No deployment of ElectionSystem on network {network_id}"
            )

        try:
            checksummed = Web3.to_checksum_address(address)
            contract = self.w3.eth.contract(address=checksummed, abi=abi)
        except Exception as e:
            raise InitializationError(details=e) from e

        self.network_id = network_id
        self.address = checksummed
        self.abi = abi
        self.contract = contract
        logger.info("Contract initialized: network=%s address=%s", network_id, checksummed)
        return contract
