import json
import os
from datetime import date
from urllib.error import HTTPError
from urllib.request import Request, urlopen

import pytest

BASE = os.getenv("SACHETWORKS_BASE_URL", "http://127.0.0.1:8000")


def _call(method: str, path: str, payload=None):
    data = json.dumps(payload).encode("utf-8") if payload is not None else None
    req = Request(f"{BASE}{path}", data=data, method=method)
    req.add_header("Accept", "application/json")
    if data is not None:
        req.add_header("Content-Type", "application/json")
    try:
        with urlopen(req, timeout=10) as resp:
            return resp.status, json.loads(resp.read().decode("utf-8"))
    except HTTPError as e:
        return e.code, json.loads(e.read().decode("utf-8") or "{}")


@pytest.fixture(scope="module")
def server():
    try:
        _call("GET", "/api/health")
    except Exception as e:
        pytest.skip(f"Server not reachable: {e}")
    return BASE


def test_sale_settled_in_two_instalments(server):
    today = date.today().isoformat()
    status, body = _call("POST", "/api/receptionist-sales",
                         {"date": today, "submittedBy": 1, "saleType": "general",
                          "priceBreakdown": [{"priceId": None, "amount": 250, "bags": 40}]})
    assert status == 201, body
    sale = body["data"]
    assert sale["expectedAmount"] == 10000.0

    status, body = _call("POST", "/api/settlements",
                         {"date": today, "receptionistSaleId": sale["id"], "expectedAmount": 10000,
                          "settledAmount": 4000, "settledBy": 1})
    assert status == 201, body
    settlement = body["data"]
    assert settlement["remainingBalance"] == 6000.0

    status, body = _call("POST", "/api/settlement-payments",
                         {"settlementId": settlement["id"], "amount": 6000, "paidBy": 1})
    assert status == 201, body
    assert body["data"]["settlement"]["isSettled"] is True

    status, body = _call("POST", "/api/settlements",
                         {"receptionistSaleId": sale["id"], "expectedAmount": 1, "settledBy": 1})
    assert status in (409, 429)
    assert body["success"] is False

    # leave the server's data as we found it
    status, _ = _call("DELETE", f"/api/receptionist-sales/{sale['id']}")
    assert status == 200
