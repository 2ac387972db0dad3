from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timezone

from appdist.services.distribute.model import ReleaseInfo
from appdist.services.distribute.payload import (
    blockquote,
    build_payload,
    escape_mrkdwn,
    slack_timestamp,
)

NOW = datetime(2026, 10, 19, 14, 30, tzinfo=timezone.utc)


def _info() -> ReleaseInfo:
    return ReleaseInfo(
        environment="Stage",
        build_type="Release",
        description="Fixed crash\nImproved startup",
        groups=("qa", "devs"),
        branch="main",
        author="Jane Doe",
    )


def test_blockquote_prefixes_every_line() -> None:
    assert blockquote("a\nb") == ">a\n>b"


def test_slack_timestamp() -> None:
    token = slack_timestamp(NOW)
    assert token == f"<!date^{int(NOW.timestamp())}^{{date_short_pretty}} at {{time}}|2026-10-19 14:30>"


def test_payload_blocks_in_order() -> None:
    payload = build_payload(info=_info(), url="https://example.test/xyz", now=NOW)

    kinds = [block["type"] for block in payload["blocks"]]
    assert kinds == ["header", "divider", "section", "section", "actions", "context"]


def test_payload_fields() -> None:
    payload = build_payload(info=_info(), url="https://example.test/xyz", now=NOW)
    blocks = payload["blocks"]

    assert "StageRelease" in blocks[0]["text"]["text"]
    fields = [f["text"] for f in blocks[2]["fields"]]
    assert "*Environment:*\nStage" in fields
    assert "*Build Type:*\nRelease" in fields
    assert "*Branch:*\n`main`" in fields
    assert "*Author:*\nJane Doe" in fields
    assert "*Groups:*\nqa, devs" in fields
    assert blocks[3]["text"]["text"] == "*Description:*\n>Fixed crash\n>Improved startup"


def test_payload_button_and_footer() -> None:
    payload = build_payload(info=_info(), url="https://example.test/xyz", now=NOW)
    blocks = payload["blocks"]

    button = blocks[4]["elements"][0]
    assert button["url"] == "https://example.test/xyz"
    assert button["style"] == "primary"
    assert "<!date^" in blocks[5]["elements"][0]["text"]
    assert payload["text"].endswith("https://example.test/xyz")


def test_payload_is_json_serialisable() -> None:
    payload = build_payload(info=_info(), url="https://example.test/xyz", now=NOW)
    assert json.loads(json.dumps(payload)) == payload


def test_escape_mrkdwn() -> None:
    assert escape_mrkdwn("a<b & c>d") == "a&lt;b &amp; c&gt;d"
    assert escape_mrkdwn("&lt;") == "&amp;lt;"


def test_blockquote_escapes_but_keeps_quote_marker() -> None:
    assert blockquote("x > y\n<!here>") == ">x &gt; y\n>&lt;!here&gt;"


def test_operator_text_cannot_inject_mentions() -> None:
    info = replace(
        _info(),
        description="fix <!channel> & a<b",
        branch="feat/<@U123>",
        author="Tom & Jerry",
        groups=("qa<x>",),
    )
    payload = build_payload(info=info, url="https://example.test/xyz", now=NOW)

    description = payload["blocks"][3]["text"]["text"]
    assert description == "*Description:*\n>fix &lt;!channel&gt; &amp; a&lt;b"

    fields = [f["text"] for f in payload["blocks"][2]["fields"]]
    assert "*Branch:*\n`feat/&lt;@U123&gt;`" in fields
    assert "*Author:*\nTom &amp; Jerry" in fields
    assert "*Groups:*\nqa&lt;x&gt;" in fields
    assert "<!channel>" not in json.dumps(payload)
