import json

import pytest
from fastapi.testclient import TestClient

from chain.abi import ELECTION_ABI
from chain.binding import ContractBinding
from election_service import ElectionGateway
from tests.fake_ledger import CONTRACT_ADDRESS, NETWORK_ID, FakeLedger


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def artifact_path(tmp_path):
    path = tmp_path / "ElectionSystem.json"
    path.write_text(json.dumps({
        "contractName": "ElectionSystem",
        "abi": ELECTION_ABI,
        "networks": {NETWORK_ID: {"address": CONTRACT_ADDRESS}},
    }))
    return path


@pytest.fixture
def binding(ledger, artifact_path):
    return ContractBinding(artifact_path=artifact_path, w3=ledger.w3)


@pytest.fixture
def gateway(binding):
    return ElectionGateway(binding, gas_limit=3000000)


@pytest.fixture
def client(gateway):
    from main import create_app

    with TestClient(create_app(gateway)) as c:
        yield c
