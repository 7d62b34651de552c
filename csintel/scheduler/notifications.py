"""
Notification handlers for scheduled sync results.

Supports:
- Slack webhooks
- Discord webhooks
- Logging fallback
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..config.settings import settings

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT = 10.0


async def send_sync_summary(
    job_id: str,
    report: Optional[Dict[str, Any]],
    duration_seconds: float,
    error: Optional[str] = None,
) -> int:
    """
    Send a sync summary to the configured webhooks.

    Args:
        job_id: Identifier for this job run
        report: sync_all() output ({"results": [...], "summary": {...}})
        duration_seconds: Total job duration
        error: Error message when the job failed

    Returns:
        Number of channels the message was delivered to
    """
    if error or report is None:
        message = build_error_message(job_id, error or "No sync report produced", duration_seconds)
    else:
        message = build_success_message(job_id, report, duration_seconds)

    logger.info(message["text"])

    delivered = 0
    if settings.slack_webhook_url and await _send_slack(message):
        delivered += 1
    if settings.discord_webhook_url and await _send_discord(message):
        delivered += 1
    return delivered


def build_success_message(job_id: str, report: Dict[str, Any], duration: float) -> dict:
    summary = report["summary"]
    failed_sources = [r["sourceId"] for r in report["results"] if not r["success"]]
    status_emoji = ":white_check_mark:" if summary["failed"] == 0 else ":warning:"

    text = f"""{status_emoji} *CS Intelligence Sync Complete* [{job_id}]

*Summary:*
- Sources synced: {summary['successful']}/{summary['totalSources']}
- New records: {summary['newRecords']}
- Updated records: {summary['updatedRecords']}
- Errors: {summary['errors']}
- Duration: {duration:.1f}s

*Failed sources:* {', '.join(failed_sources) or 'None'}"""

    return {
        "text": text.strip(),
        "blocks": [
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": text.strip()},
            }
        ],
    }


def build_error_message(job_id: str, error: str, duration: float) -> dict:
    text = f""":x: *CS Intelligence Sync FAILED* [{job_id}]

*Error:* {error}
*Duration before failure:* {duration:.1f}s

Please check logs for details."""

    return {"text": text.strip()}


async def _send_slack(message: dict) -> bool:
    """Send message to Slack webhook. Returns True on success."""
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(settings.slack_webhook_url, json=message, timeout=WEBHOOK_TIMEOUT)
            response.raise_for_status()
            logger.info("Slack notification sent")
            return True
    except httpx.HTTPError as e:
        logger.error(f"Failed to send Slack notification: {e}")
        return False


async def _send_discord(message: dict) -> bool:
    """Send message to Discord webhook. Returns True on success."""
    # Discord uses 'content' instead of 'text'
    payload = {"content": message["text"]}
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(settings.discord_webhook_url, json=payload, timeout=WEBHOOK_TIMEOUT)
            response.raise_for_status()
            logger.info("Discord notification sent")
            return True
    except httpx.HTTPError as e:
        logger.error(f"Failed to send Discord notification: {e}")
        return False
