"""
SmartExpenseSplitter - FastAPI Web Backend

This module serves the JSON API of the expense splitter using FastAPI.

Features:
    - RESTful API for managing groups, participants and expenses
    - In-memory ledgers, one per group (nothing survives a restart)
    - Balance snapshots and greedy settlement plans
    - Recording a settlement plan as paid

Endpoints:
    POST /groups                                  - Create a new group
    GET  /groups                                  - List groups
    POST /groups/{group_id}/participants          - Register a participant
    GET  /groups/{group_id}/participants/{name}   - Get one participant's balance
    POST /groups/{group_id}/expenses              - Post an expense
    GET  /groups/{group_id}/expenses              - List expenses in posting order
    GET  /groups/{group_id}/balances              - Get every balance
    GET  /groups/{group_id}/settlements           - Get the settlement plan
    POST /groups/{group_id}/settlements/apply     - Record the plan as paid

Usage:
    uvicorn main:app --reload
"""

from decimal import Decimal
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from config.settings import configure_logging, get_settings
from errors import RoundingResidue, SplitterError, UnknownParticipant
from ledger import Ledger
from store import LedgerStore, UnknownGroup
from utils import describe_balance


# =============================================================================
# Pydantic Models for Request/Response Validation
# =============================================================================

class GroupCreate(BaseModel):
    """Request model for creating a new group."""
    name: Optional[str] = Field(None, description="Optional group name")


class GroupResponse(BaseModel):
    """Response model for group data."""
    group_id: str
    name: str
    participants: int
    expenses: int


class ParticipantCreate(BaseModel):
    """Request model for registering a participant."""
    name: str = Field(..., min_length=1, description="Participant name")


class ParticipantResponse(BaseModel):
    """Response model for participant data."""
    name: str
    balance: Decimal
    status: str
    summary: str


class ExpenseCreate(BaseModel):
    """Request model for posting an expense."""
    description: str = Field("", description="What the money was spent on")
    amount: Decimal = Field(..., description="Expense amount (must be > 0)")
    payer: str = Field(..., min_length=1, description="Name of who paid")
    split_among: list[str] = Field(..., description="Names sharing the cost")


class ExpenseResponse(BaseModel):
    """Response model for expense data."""
    expense_id: str
    description: str
    amount: Decimal
    payer: str
    split_among: list[str]
    share_per_person: Decimal


class BalancesResponse(BaseModel):
    """Response model for a balance snapshot."""
    balances: dict[str, Decimal]
    total: Decimal


class TransactionResponse(BaseModel):
    """Response model for one settlement payment."""
    from_participant: str
    to_participant: str
    amount: Decimal


class SettlementResponse(BaseModel):
    """Response model for a settlement plan."""
    settled: bool
    transactions: list[TransactionResponse]


class AppliedSettlementResponse(BaseModel):
    """Response model for a settlement plan recorded as paid."""
    transactions: list[TransactionResponse]
    balances: dict[str, Decimal]


# =============================================================================
# FastAPI Application
# =============================================================================

configure_logging()

app = FastAPI(
    title="Smart Expense Splitter",
    description="Shared expense tracking with greedy debt settlement",
    version="1.0.0"
)

_store = LedgerStore(get_settings().residue_policy)


def get_store() -> LedgerStore:
    return _store


# =============================================================================
# Helper Functions
# =============================================================================

def _ledger_or_404(store: LedgerStore, group_id: str) -> Ledger:
    try:
        return store.get_ledger(group_id)
    except UnknownGroup as e:
        raise HTTPException(status_code=404, detail=str(e))


def _participant_response(ledger: Ledger, name: str) -> ParticipantResponse:
    participant = ledger.get_participant(name)
    return ParticipantResponse(
        **participant.to_dict(),
        summary=describe_balance(participant.name, participant.balance, get_settings().currency_symbol)
    )


def _transaction_responses(transactions) -> list[TransactionResponse]:
    return [
        TransactionResponse(
            from_participant=t.debtor,
            to_participant=t.creditor,
            amount=t.amount
        )
        for t in transactions
    ]


# =============================================================================
# API Endpoints
# =============================================================================

@app.post("/groups", response_model=GroupResponse, status_code=201)
async def create_group(group_data: GroupCreate = None, store: LedgerStore = Depends(get_store)):
    """Create a new, empty group and return its id."""
    group = store.create_group(group_data.name if group_data else None)
    return GroupResponse(**group.to_dict())


@app.get("/groups", response_model=list[GroupResponse])
async def list_groups(store: LedgerStore = Depends(get_store)):
    return [GroupResponse(**group.to_dict()) for group in store.list_groups()]


@app.post("/groups/{group_id}/participants", response_model=ParticipantResponse, status_code=201)
async def add_group_participant(
    group_id: str,
    participant_data: ParticipantCreate,
    store: LedgerStore = Depends(get_store)
):
    """
    Register a participant.

    Request flow:
        1. Look up the group's ledger
        2. Call Ledger.register_participant()
        3. Return the new participant with its zero balance
    """
    ledger = _ledger_or_404(store, group_id)
    try:
        participant = ledger.register_participant(participant_data.name)
        return _participant_response(ledger, participant.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/groups/{group_id}/participants/{name}", response_model=ParticipantResponse)
async def get_group_participant(group_id: str, name: str, store: LedgerStore = Depends(get_store)):
    ledger = _ledger_or_404(store, group_id)
    try:
        return _participant_response(ledger, name)
    except UnknownParticipant as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/groups/{group_id}/expenses", response_model=ExpenseResponse, status_code=201)
async def add_group_expense(
    group_id: str,
    expense_data: ExpenseCreate,
    store: LedgerStore = Depends(get_store)
):
    """
    Post an expense.

    Request flow:
        1. Validate input using the Pydantic model
        2. Call Ledger.post_expense(), which validates atomically
        3. Return the posted expense

    Any rejected expense leaves the ledger unchanged and returns 400.
    """
    ledger = _ledger_or_404(store, group_id)
    try:
        expense = ledger.post_expense(
            description=expense_data.description,
            amount=expense_data.amount,
            payer_name=expense_data.payer.strip(),
            split_names=[name.strip() for name in expense_data.split_among]
        )
        return ExpenseResponse(**expense.to_dict())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/groups/{group_id}/expenses", response_model=list[ExpenseResponse])
async def list_group_expenses(group_id: str, store: LedgerStore = Depends(get_store)):
    ledger = _ledger_or_404(store, group_id)
    return [ExpenseResponse(**e.to_dict()) for e in ledger.list_expenses()]


@app.get("/groups/{group_id}/balances", response_model=BalancesResponse)
async def get_group_balances(group_id: str, store: LedgerStore = Depends(get_store)):
    ledger = _ledger_or_404(store, group_id)
    balances = ledger.balances()
    return BalancesResponse(balances=balances, total=ledger.total_balance())


@app.get("/groups/{group_id}/settlements", response_model=SettlementResponse)
async def get_group_settlements(group_id: str, store: LedgerStore = Depends(get_store)):
    """
    Compute the settlement plan for the current balances.

    Read-only: balances are not changed. Returns 409 if the balances do
    not net to zero.
    """
    ledger = _ledger_or_404(store, group_id)
    try:
        transactions = ledger.plan_settlements()
    except RoundingResidue as e:
        raise HTTPException(status_code=409, detail=str(e))
    return SettlementResponse(
        settled=not transactions,
        transactions=_transaction_responses(transactions)
    )


@app.post("/groups/{group_id}/settlements/apply", response_model=AppliedSettlementResponse)
async def apply_group_settlements(group_id: str, store: LedgerStore = Depends(get_store)):
    """
    Record the current settlement plan as paid.

    Request flow:
        1. Plan and apply under one lock with Ledger.settle_up()
        2. Return the applied transactions and the new balances
    """
    ledger = _ledger_or_404(store, group_id)
    try:
        transactions = ledger.settle_up()
    except RoundingResidue as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SplitterError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AppliedSettlementResponse(
        transactions=_transaction_responses(transactions),
        balances=ledger.balances()
    )


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": "Smart Expense Splitter"}


# =============================================================================
# Run with: python main.py
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=True)
