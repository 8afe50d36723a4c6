# app/config.py
from dotenv import load_dotenv
from pathlib import Path
import os

load_dotenv()

# ------------------------------------------------------------
# Ledger node / contract
# ------------------------------------------------------------
RPC_URL = os.getenv("RPC_URL", "http://127.0.0.1:7545")

# Truffle build artifact: carries both the ABI and the per-network deployments
CONTRACT_ARTIFACT_PATH = Path(
    os.getenv("CONTRACT_ARTIFACT_PATH", "build/contracts/ElectionSystem.json")
)

# Optional explicit address; wins over the artifact's network lookup
CONTRACT_ADDRESS = os.getenv("CONTRACT_ADDRESS", "")

GAS_LIMIT = int(os.getenv("GAS_LIMIT", "3000000"))

# ------------------------------------------------------------
# HTTP
# ------------------------------------------------------------
API_PREFIX = os.getenv("API_PREFIX", "/api")
CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

