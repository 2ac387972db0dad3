from __future__ import annotations

from pathlib import Path

from appdist.core.result import Err, Ok, Result
from appdist.net.http import HttpClient
from appdist.services.distribute.errors import DistributeError
from appdist.services.distribute.payload import ChatPayload


def read_webhook_url(path: Path) -> Result[str, DistributeError]:
    """First non-empty line of the webhook file."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            DistributeError(
                kind="webhook_missing",
                message=f"webhook file not found: {path}",
                hint="put the Slack incoming-webhook URL on the first line",
            )
        )
    except (OSError, UnicodeDecodeError) as e:
        return Err(DistributeError(kind="webhook_missing", message=f"cannot read {path}: {e}"))

    for line in text.splitlines():
        url = line.strip()
        if url:
            return Ok(url)
    return Err(DistributeError(kind="webhook_missing", message=f"webhook file is empty: {path}"))


def send_notification(
    *, client: HttpClient, url: str, payload: ChatPayload
) -> Result[None, DistributeError]:
    result = client.post_json(url, payload)
    if isinstance(result, Err):
        # The URL embeds the webhook secret; only report the status.
        return Err(
            DistributeError(
                kind="webhook_failed",
                message=f"Slack notification failed: {result.error.message}",
                hint=f"HTTP {result.error.status}" if result.error.status else None,
            )
        )
    return Ok(None)
