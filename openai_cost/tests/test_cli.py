import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from openai_cost import cli
from openai_cost.api.client import CostClient

from .conftest import RecordingHandler, bucket_payload, page_payload


def _patch_client(monkeypatch, replies):
    handler = RecordingHandler(replies)

    class StubClient(CostClient):
        @classmethod
        def from_env(cls, **kwargs):
            return super().from_env(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(cli, "CostClient", StubClient)
    return handler


def test_json_output_single_page(monkeypatch, capsys):
    monkeypatch.setenv("OPENAI_ADMIN_KEY", "sk-test")
    handler = _patch_client(
        monkeypatch,
        [(200, page_payload([bucket_payload(1730419200, 0.06)], has_more=True, next_page="c2"))],
    )

    cli.main(["-s", "1730419200", "-e", "1730505600", "--json", "--group-by", "project_id"])

    doc = json.loads(capsys.readouterr().out)
    assert doc["has_more"] is True
    assert doc["next_page"] == "c2"
    assert doc["data"][0]["start_time"] == 1730419200

    params = handler.requests[0].url.params
    assert params.get("start_time") == "1730419200"
    assert params.get("end_time") == "1730505600"
    assert params.get("bucket_width") == "1d"
    assert params.get("limit") == "7"
    assert params.get_list("group_by[]") == ["project_id"]


def test_text_report_fetch_all(monkeypatch, capsys):
    monkeypatch.setenv("OPENAI_ADMIN_KEY", "sk-test")
    handler = _patch_client(
        monkeypatch,
        [
            (200, page_payload([bucket_payload(1730419200, 0.05)], has_more=True, next_page="c2")),
            (200, page_payload([bucket_payload(1730505600, 0.03)])),
        ],
    )

    cli.main(["-s", "1730419200", "--fetch-all", "--project-ids", "proj_1,proj_2"])

    out = capsys.readouterr().out
    assert "OpenAI Cost Report" in out
    assert "Total Cost: $0.0800 USD" in out
    assert "Time Buckets: 2" in out
    assert "More data available" not in out
    assert handler.cursors() == [None, "c2"]
    assert handler.requests[0].url.params.get_list("project_ids[]") == ["proj_1", "proj_2"]


def test_max_pages_cut_off_is_reported(monkeypatch, capsys):
    monkeypatch.setenv("OPENAI_ADMIN_KEY", "sk-test")
    handler = _patch_client(
        monkeypatch,
        [
            (200, page_payload([bucket_payload(1730419200, 0.05)], has_more=True, next_page="c2")),
            (200, page_payload([bucket_payload(1730505600, 0.03)])),
        ],
    )

    cli.main(["-s", "1730419200", "--fetch-all", "--max-pages", "1"])

    out = capsys.readouterr().out
    assert len(handler.requests) == 1
    assert "Total Cost: $0.0500 USD" in out
    assert "More data available" in out
    assert "Next page: c2" in out


def test_max_pages_cut_off_in_json(monkeypatch, capsys):
    monkeypatch.setenv("OPENAI_ADMIN_KEY", "sk-test")
    _patch_client(
        monkeypatch,
        [(200, page_payload([bucket_payload(1730419200, 0.05)], has_more=True, next_page="c2"))],
    )

    cli.main(["-s", "1730419200", "--fetch-all", "--max-pages", "1", "--json"])

    doc = json.loads(capsys.readouterr().out)
    assert doc["has_more"] is True
    assert doc["next_page"] == "c2"
    assert len(doc["data"]) == 1


def test_single_page_prints_next_cursor(monkeypatch, capsys):
    monkeypatch.setenv("OPENAI_ADMIN_KEY", "sk-test")
    _patch_client(monkeypatch, [(200, page_payload([bucket_payload(1, 1.0)], has_more=True, next_page="c9"))])

    cli.main(["-s", "1730419200"])

    out = capsys.readouterr().out
    assert "Use --fetch-all" in out
    assert "Next page: c9" in out


def test_missing_key_exits_with_error(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["-s", "7"])

    assert exc.value.code == 1
    assert "OPENAI_ADMIN_KEY" in capsys.readouterr().err


def test_http_error_exits_with_classified_message(monkeypatch, capsys):
    monkeypatch.setenv("OPENAI_ADMIN_KEY", "sk-test")
    _patch_client(monkeypatch, [(500, {"error": {"message": "boom", "type": "server_error"}})])

    with pytest.raises(SystemExit) as exc:
        cli.main(["-s", "1730419200"])

    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "Server Error: boom" in err
    assert "sk-test" not in err


@pytest.mark.parametrize(
    "argv",
    [
        ["-s", "7", "--bucket-width", "1h"],
        ["-s", "7", "--limit", "0"],
        ["-s", "7", "--limit", "181"],
        ["-s", "7", "--group-by", "model"],
        ["-s", "-3"],
        ["-s", "7", "--fetch-all", "--max-pages", "0"],
    ],
)
def test_invalid_arguments_rejected(argv):
    with pytest.raises(SystemExit) as exc:
        cli.parse_args(argv)
    assert exc.value.code == 2


def test_resolve_start_time_days_ago_and_timestamp():
    now = datetime(2025, 6, 4, 12, 0, tzinfo=timezone.utc)

    assert cli.resolve_start_time(7, now=now) == now - timedelta(days=7)
    assert cli.resolve_start_time(999, now=now) == now - timedelta(days=999)
    assert cli.resolve_start_time(1730419200) == datetime.fromtimestamp(1730419200, tz=timezone.utc)


def test_build_query_from_args():
    args = cli.parse_args(["-s", "1730419200", "--group-by", "project_id, line_item", "--page", "cur"])

    params = cli.build_query(args)

    assert params.group_by == ("project_id", "line_item")
    assert params.page == "cur"
    assert params.end_time is None
    assert params.bucket_width == "1d"
