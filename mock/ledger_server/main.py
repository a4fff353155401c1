from collections import defaultdict
from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel

app = FastAPI(title="Mock Token Ledger", version="1.0.0")

balances: dict[tuple[str, str], int] = defaultdict(int)
applied_keys: set[str] = set()


class MintRequest(BaseModel):
    token: str
    account: str
    amount: str


class TransferRequest(BaseModel):
    token: str
    source: str
    destination: str
    amount: str


@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/ledger/mint")
def mint(body: MintRequest):
    balances[(body.token, body.account)] += int(body.amount)
    return {"balance": str(balances[(body.token, body.account)])}

@app.post("/ledger/transfers")
def transfer(body: TransferRequest, idempotency_key: str | None = Header(default=None)):
    if idempotency_key and idempotency_key in applied_keys:
        return {"status": "duplicate"}
    amount = int(body.amount)
    if amount <= 0:
        raise HTTPException(status_code=422, detail="amount must be positive")
    if balances[(body.token, body.source)] < amount:
        raise HTTPException(status_code=409, detail="insufficient balance")
    balances[(body.token, body.source)] -= amount
    balances[(body.token, body.destination)] += amount
    if idempotency_key:
        applied_keys.add(idempotency_key)
    return {"status": "applied"}

@app.get("/ledger/balances/{token}/{account}")
def balance(token: str, account: str):
    return {"balance": str(balances[(token, account)])}
