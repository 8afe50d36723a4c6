# app/election_routes.py
"""
Election endpoints. Each route validates its input, hands off to the shared
ElectionGateway and returns the normalized result; failures are rendered by
the GatewayError handlers registered in main.py.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, Request
from pydantic import BaseModel, Field

from election_service import ElectionGateway
from errors import success

router = APIRouter(tags=["election"])


def get_gateway(request: Request) -> ElectionGateway:
    # No I/O here: body validation must finish before the ledger is touched
    return request.app.state.gateway


class _Body(BaseModel):
    model_config = {"str_strip_whitespace": True}


class RegisterRequest(_Body):
    name: str = Field(..., min_length=1)
    dateOfBirth: str = Field(..., min_length=1)
    parentName: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    mobileNo: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    cnicNumber: str = Field(..., min_length=1)


class LoginRequest(_Body):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LogoutRequest(_Body):
    cnicNumber: str = Field(..., min_length=1)


class CandidateRequest(_Body):
    name: str = Field(..., min_length=1)


class VoteRequest(_Body):
    candidateName: str = Field(..., min_length=1)


# ────────────────────────────────────────────────────────────
# Users
# ────────────────────────────────────────────────────────────

@router.post("/register")
async def register(req: RegisterRequest, gateway: ElectionGateway = Depends(get_gateway)):
    tx_hash = await gateway.register_user(
        req.name,
        req.dateOfBirth,
        req.parentName,
        req.email,
        req.mobileNo,
        req.password,
        req.cnicNumber,
    )
    return success(message="User registered successfully", transaction=tx_hash)


@router.post("/login")
async def login(req: LoginRequest, gateway: ElectionGateway = Depends(get_gateway)):
    tx_hash = await gateway.login(req.email, req.password)
    return success(message="Login successful", transaction=tx_hash)


@router.post("/logout")
async def logout(req: LogoutRequest, gateway: ElectionGateway = Depends(get_gateway)):
    tx_hash = await gateway.logout(req.cnicNumber)
    return success(message="Logout successful", transaction=tx_hash)


@router.get("/getUserDetailsByEmail")
async def user_details_by_email(
    email: str = Query(..., min_length=1),
    gateway: ElectionGateway = Depends(get_gateway),
):
    details = await gateway.get_user_details_by_email(email.strip())
    return success(**{k: v for k, v in details.items() if k != "success"})


# ────────────────────────────────────────────────────────────
# Candidates / voting
# ────────────────────────────────────────────────────────────

@router.post("/candidates")
async def add_candidate(req: CandidateRequest, gateway: ElectionGateway = Depends(get_gateway)):
    tx_hash = await gateway.add_candidate(req.name)
    return success(message="Candidate added successfully", transaction=tx_hash)


@router.post("/vote")
async def vote(req: VoteRequest, gateway: ElectionGateway = Depends(get_gateway)):
    tx_hash = await gateway.vote(req.candidateName)
    return success(message="Vote cast successfully", transaction=tx_hash)


@router.get("/results")
async def results(gateway: ElectionGateway = Depends(get_gateway)):
    winner = await gateway.get_results()
    return success(data={"winningCandidate": winner})


@router.get("/candidate/{candidate_id}")
async def candidate(
    candidate_id: int = Path(..., ge=1),
    gateway: ElectionGateway = Depends(get_gateway),
):
    return await gateway.get_candidate(candidate_id)


@router.get("/candidates")
async def candidates(gateway: ElectionGateway = Depends(get_gateway)):
    return await gateway.list_candidates()
