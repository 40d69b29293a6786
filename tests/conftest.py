"""Shared fixtures: a fake Fusion+ API served through httpx.MockTransport."""

import json

import httpx
import pytest
from eth_account import Account

from stablecenter_sdk import SecureSwapService


# Test wallet (DO NOT use in production)
TEST_PRIVATE_KEY = "0x" + "ab" * 32  # Deterministic test key
TEST_ACCOUNT = Account.from_key(TEST_PRIVATE_KEY)
TEST_ADDRESS = TEST_ACCOUNT.address

ORDER_HASH = "0x" + "cd" * 32
QUOTE_ID = "quote-123"

EXECUTED_STATUS = {
    "status": "executed",
    "orderHash": ORDER_HASH,
    "srcChainId": 1,
    "dstChainId": 8453,
    "validation": "valid",
    "remainingMakerAmount": "0",
    "deadline": 1700003600,
    "createdAt": 1700000000000,
    "cancelable": False,
    "fills": [
        {
            "txHash": "0x" + "ef" * 32,
            "filledMakerAmount": "1000000",
            "filledAuctionTakerAmount": "999000",
            "status": "executed",
        }
    ],
}

PENDING_STATUS = {"status": "pending", "orderHash": ORDER_HASH, "fills": []}


class FakeFusionApi:
    """In-memory stand-in for the upstream swap network.

    ``statuses`` and ``ready_fills`` are consumed one entry per call; the last
    status keeps repeating once the list is down to one entry. A status entry
    that is an int is returned as that HTTP error code.
    """

    def __init__(self, secrets_count=1):
        self.secrets_count = secrets_count
        self.quote_response = None
        self.quote_error = None
        self.submit_error = None
        self.statuses = [EXECUTED_STATUS]
        self.ready_fills = []
        self.requests = []
        self.revealed = []
        self.built_orders = []
        self.submitted_orders = []

    def _quote(self):
        if self.quote_response is not None:
            return self.quote_response
        return {
            "srcTokenAmount": "1000000",
            "dstTokenAmount": "999000",
            "quoteId": QUOTE_ID,
            "recommendedPreset": "fast",
            "presets": {
                "fast": {"secretsCount": self.secrets_count},
                "slow": {"secretsCount": 1},
            },
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.replace("/fusion-plus", "", 1)
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        if path == "/quoter/v1.0/quote":
            if self.quote_error is not None:
                return httpx.Response(self.quote_error, text="upstream exploded")
            return httpx.Response(200, json=self._quote())

        if path == "/orders/v1.0/order":
            self.built_orders.append(body)
            return httpx.Response(
                200,
                json={
                    "hash": ORDER_HASH,
                    "quoteId": body["quoteId"],
                    "order": {"maker": body["walletAddress"]},
                },
            )

        if path == "/relayer/v1.0/submit":
            if self.submit_error is not None:
                return httpx.Response(self.submit_error, text="relayer rejected order")
            self.submitted_orders.append(body)
            return httpx.Response(201)

        if path == "/relayer/v1.0/submit/secret":
            self.revealed.append(body)
            return httpx.Response(201)

        if path.startswith("/orders/v1.0/order/status/"):
            entry = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            if isinstance(entry, int):
                return httpx.Response(entry, text="status unavailable")
            return httpx.Response(200, json=entry)

        if path.endswith("/ready-to-accept-secret-fills"):
            fills = self.ready_fills.pop(0) if self.ready_fills else []
            return httpx.Response(200, json={"fills": [{"idx": idx} for idx in fills]})

        return httpx.Response(404, text=f"no route for {path}")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def calls_to(self, path):
        return [r for r in self.requests if r[1] == path]


@pytest.fixture
def fake_api():
    return FakeFusionApi()


@pytest.fixture
def service(fake_api):
    return SecureSwapService(
        {"auth_key": "test-key", "poll_interval": 0.001},
        http_client=fake_api.client(),
    )
