"""Slack block-kit message announcing an uploaded build."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from appdist.services.distribute.model import ReleaseInfo

ChatPayload = dict[str, Any]


def escape_mrkdwn(text: str) -> str:
    """Escape the three characters Slack treats as control sequences."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def blockquote(text: str) -> str:
    """Escape ``text`` and prefix every line with Slack's quote marker."""
    return "\n".join(f">{escape_mrkdwn(line)}" for line in text.split("\n"))


def slack_timestamp(now: datetime) -> str:
    """Relative date token rendered by Slack in the reader's timezone."""
    epoch = int(now.timestamp())
    fallback = now.strftime("%Y-%m-%d %H:%M")
    return f"<!date^{epoch}^{{date_short_pretty}} at {{time}}|{fallback}>"


def _field(label: str, value: str) -> dict[str, str]:
    return {"type": "mrkdwn", "text": f"*{label}:*\n{value}"}


def build_payload(*, info: ReleaseInfo, url: str, now: datetime) -> ChatPayload:
    title = f"New {info.variant} build available"
    return {
        "text": f"{title}: {url}",
        "blocks": [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": f"🚀 {title}", "emoji": True},
            },
            {"type": "divider"},
            {
                "type": "section",
                "fields": [
                    _field("Environment", escape_mrkdwn(info.environment)),
                    _field("Build Type", escape_mrkdwn(info.build_type)),
                    _field("Branch", f"`{escape_mrkdwn(info.branch)}`"),
                    _field("Author", escape_mrkdwn(info.author)),
                    _field("Groups", escape_mrkdwn(info.groups_csv)),
                ],
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"*Description:*\n{blockquote(info.description)}",
                },
            },
            {
                "type": "actions",
                "elements": [
                    {
                        "type": "button",
                        "text": {"type": "plain_text", "text": "Open in App Distribution"},
                        "url": url,
                        "style": "primary",
                    }
                ],
            },
            {
                "type": "context",
                "elements": [
                    {"type": "mrkdwn", "text": f"Uploaded {slack_timestamp(now)}"},
                ],
            },
        ],
    }
