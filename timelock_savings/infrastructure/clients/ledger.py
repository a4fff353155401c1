"""Token ledger HTTP client with exponential backoff retry logic"""

import time
import uuid
import httpx
from timelock_savings.config import settings
from timelock_savings.domain.exceptions import LedgerError
from timelock_savings.infrastructure.observability.metrics import transfer_latency_histogram, transfer_failure_counter


class LedgerClient:
    """Client for moving token balances through the external ledger service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.ledger_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries or settings.transfer_max_retries
        self.backoff_base = settings.transfer_backoff_base if backoff_base is None else backoff_base
        self.transport = transport

    def transfer(self, token: str, source: str, destination: str, amount: int) -> None:
        """
        Move `amount` of `token` from `source` to `destination`.

        Retry strategy:
        - Same Idempotency-Key on every attempt so a retried transfer is applied once
        - Exponential backoff: base, 2*base, 4*base, ...
        - Retries on 5xx errors and network failures; 4xx fails immediately
        - Tracks latency histogram and failure counter

        Raises:
            LedgerError: When the ledger rejects the transfer or retries run out
        """
        payload = {
            "token": token,
            "source": source,
            "destination": destination,
            "amount": str(amount),  # i128 does not survive JSON number parsing everywhere
        }
        headers = {"Idempotency-Key": str(uuid.uuid4())}

        attempt = 0
        with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with transfer_latency_histogram.time():
                        response = client.post("/ledger/transfers", json=payload, headers=headers)
                        response.raise_for_status()
                        return  # Success

                except httpx.HTTPStatusError as e:
                    transfer_failure_counter.inc()
                    if e.response.status_code < 500:
                        raise LedgerError(
                            f"Ledger rejected transfer: {e.response.status_code} {e.response.text}"
                        ) from e
                    error = e

                except httpx.RequestError as e:
                    transfer_failure_counter.inc()
                    error = e

                attempt += 1
                if attempt >= self.max_retries:
                    raise LedgerError(f"Ledger transfer failed after {attempt} attempts: {error}") from error

                backoff = self.backoff_base * (2 ** (attempt - 1))
                time.sleep(backoff)
