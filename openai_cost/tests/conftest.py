import json
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1].parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_KEY = "sk-admin-test-secret"


def bucket_payload(start, value, currency="usd", line_item=None, project_id=None):
    return {
        "object": "bucket",
        "start_time": start,
        "end_time": start + 86400,
        "results": [
            {
                "object": "organization.costs.result",
                "amount": {"value": value, "currency": currency},
                "line_item": line_item,
                "project_id": project_id,
            }
        ],
    }


def page_payload(buckets, has_more=False, next_page=None):
    return {"object": "page", "data": buckets, "has_more": has_more, "next_page": next_page}


class RecordingHandler:
    """Serves queued ``(status, body)`` replies and remembers every request."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.replies.pop(0)
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode("utf-8")
        elif isinstance(body, str):
            body = body.encode("utf-8")
        return httpx.Response(status, content=body)

    def cursors(self):
        return [r.url.params.get("page") for r in self.requests]


@pytest.fixture
def make_client():
    from openai_cost.api.client import CostClient

    def factory(replies, **kwargs):
        handler = RecordingHandler(replies)
        client = CostClient(TEST_KEY, transport=httpx.MockTransport(handler), **kwargs)
        return client, handler

    return factory


@pytest.fixture(autouse=True)
def _clear_admin_key(monkeypatch):
    monkeypatch.delenv("OPENAI_ADMIN_KEY", raising=False)
