# app/chain/candidates.py
"""
Walks the contract's candidate table. Ids are 1-based and contiguous, so the
listing is getTotalCandidates() followed by getCandidate(1..total).

Reads are issued one at a time in id order; one request never fans out
against the node. A failed read aborts the whole listing.
"""
from __future__ import annotations

from typing import Any, Dict, List

from errors import UpstreamReadError


def candidate_record(candidate_id: int, raw) -> Dict[str, Any]:
    # getCandidate returns (address, voteCount, name)
    return {
        "id": candidate_id,
        "address": raw[0],
        "voteCount": raw[1],
        "name": raw[2],
    }


class CandidateLister:
    def __init__(self, contract):
        self.contract = contract

    async def total(self) -> int:
        try:
            return int(await self.contract.functions.getTotalCandidates().call())
        except Exception as e:
            raise UpstreamReadError(details=e) from e

    async def list(self) -> List[Dict[str, Any]]:
        total = await self.total()
        candidates = []
        for cid in range(1, total + 1):
            try:
                raw = await self.contract.functions.getCandidate(cid).call()
            except Exception as e:
                raise UpstreamReadError(
                    f"Failed to read candidate {cid}", details=e, index=cid
                ) from e
            candidates.append(candidate_record(cid, raw))
        return candidates
