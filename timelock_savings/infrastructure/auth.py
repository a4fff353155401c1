"""Authorization adapters"""

from timelock_savings.domain.exceptions import Unauthorized


class CallerAuthorizer:
    """
    Authorizes only the identity authenticated for the current request.

    The host (or an upstream gateway) is responsible for proving who the
    caller is; this adapter only enforces "act as yourself".
    """

    def __init__(self, caller: str | None):
        self.caller = caller

    def require_auth(self, identity: str) -> None:
        if not self.caller:
            raise Unauthorized("Request is not authenticated")
        if self.caller != identity:
            raise Unauthorized(f"Caller {self.caller} may not act as {identity}")


class AllowAllAuthorizer:
    """Accepts every identity; for test harnesses and local simulations"""

    def require_auth(self, identity: str) -> None:
        return None
