import asyncio

import pytest

from chain.candidates import CandidateLister
from errors import UpstreamReadError
from tests.fake_ledger import CONTRACT_ADDRESS, SIGNER


def _contract(ledger):
    return ledger.w3.eth.contract(address=CONTRACT_ADDRESS, abi=[])


def _reads(ledger):
    return [args[0] for name, args in ledger.calls if name == "getCandidate"]


def test_zero_candidates_issue_no_reads(ledger):
    ledger.responses["getTotalCandidates"] = 0

    out = asyncio.run(CandidateLister(_contract(ledger)).list())

    assert out == []
    assert _reads(ledger) == []


def test_reads_each_id_once_in_ascending_order(ledger):
    ledger.responses["getTotalCandidates"] = 5
    ledger.responses["getCandidate"] = lambda cid: (SIGNER, cid * 10, f"cand-{cid}")

    out = asyncio.run(CandidateLister(_contract(ledger)).list())

    assert _reads(ledger) == [1, 2, 3, 4, 5]
    assert [c["id"] for c in out] == [1, 2, 3, 4, 5]
    assert out[2] == {"id": 3, "address": SIGNER, "voteCount": 30, "name": "cand-3"}


def test_total_is_read_before_any_candidate(ledger):
    ledger.responses["getTotalCandidates"] = 2
    ledger.responses["getCandidate"] = lambda cid: (SIGNER, 0, "x")

    asyncio.run(CandidateLister(_contract(ledger)).list())

    assert [name for name, _ in ledger.calls] == [
        "getTotalCandidates", "getCandidate", "getCandidate",
    ]


def test_failed_read_aborts_listing(ledger):
    def get_candidate(cid):
        if cid == 3:
            raise RuntimeError("execution reverted")
        return (SIGNER, 1, f"cand-{cid}")

    ledger.responses["getTotalCandidates"] = 5
    ledger.responses["getCandidate"] = get_candidate

    with pytest.raises(UpstreamReadError) as exc:
        asyncio.run(CandidateLister(_contract(ledger)).list())

    assert exc.value.index == 3
    assert "execution reverted" in exc.value.details
    # ids 4 and 5 are never requested
    assert _reads(ledger) == [1, 2, 3]


def test_failed_total_read(ledger):
    ledger.responses["getTotalCandidates"] = ConnectionError("node down")

    with pytest.raises(UpstreamReadError) as exc:
        asyncio.run(CandidateLister(_contract(ledger)).list())

    assert exc.value.index is None
    assert _reads(ledger) == []
