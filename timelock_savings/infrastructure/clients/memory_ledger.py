"""In-process token ledger"""

from collections import defaultdict
from typing import Dict, Tuple
from timelock_savings.domain.exceptions import LedgerError


class InMemoryLedger:
    """Balances per (token, account); transfers are all-or-nothing"""

    def __init__(self):
        self.balances: Dict[Tuple[str, str], int] = defaultdict(int)

    def mint(self, token: str, account: str, amount: int) -> None:
        if amount <= 0:
            raise LedgerError(f"Mint amount must be positive, got {amount}")
        self.balances[(token, account)] += amount

    def balance(self, token: str, account: str) -> int:
        return self.balances.get((token, account), 0)

    def transfer(self, token: str, source: str, destination: str, amount: int) -> None:
        if amount <= 0:
            raise LedgerError(f"Transfer amount must be positive, got {amount}")

        available = self.balance(token, source)
        if available < amount:
            raise LedgerError(f"Insufficient balance: {source} has {available}, needs {amount}")

        self.balances[(token, source)] = available - amount
        self.balances[(token, destination)] += amount
