"""Collaborator interfaces the savings lifecycle depends on"""

from typing import Any, Optional, Protocol


class KeyValueStore(Protocol):
    """Durable key-value persistence scoped to one unit of work"""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def has(self, key: str) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


class Clock(Protocol):
    """Current time as unsigned seconds since epoch"""

    def now(self) -> int: ...


class Authorizer(Protocol):
    """Confirms the current caller may act as `identity`; raises Unauthorized otherwise"""

    def require_auth(self, identity: str) -> None: ...


class TokenLedger(Protocol):
    """Moves a positive amount of `token` between identities; raises LedgerError on failure"""

    def transfer(self, token: str, source: str, destination: str, amount: int) -> None: ...
