"""Slack client for sending run notifications."""

import os
from typing import Optional

import httpx
from loguru import logger


def get_webhook_url() -> Optional[str]:
    """Get Slack webhook URL from environment (SLACK_WEBHOOK_URL), or None if not configured."""
    return os.getenv("SLACK_WEBHOOK_URL") or None


def send_message(text: str, webhook_url: Optional[str] = None) -> bool:
    """Send a message to Slack.

    Args:
        text: Message text (supports Slack markdown)
        webhook_url: Override webhook URL

    Returns:
        True if sent successfully, False otherwise
    """
    url = webhook_url or get_webhook_url()

    if not url:
        logger.warning("Slack webhook URL not configured")
        return False

    try:
        response = httpx.post(
            url,
            json={"text": text},
            timeout=10.0,
        )

        if response.status_code == 200:
            logger.info("Sent Slack message")
            return True
        else:
            logger.error(f"Slack API error: {response.status_code} - {response.text}")
            return False

    except httpx.HTTPError as e:
        logger.error(f"Failed to send Slack message: {e}")
        return False


def send_error(workflow: str, error: str, webhook_url: Optional[str] = None) -> bool:
    """Send a formatted failure notification."""
    return send_message(f"*{workflow} failed*\n```{error}```", webhook_url=webhook_url)


def send_enrichment_summary(
    processed: int,
    updated: int,
    remaining: int,
    failed: int = 0,
    webhook_url: Optional[str] = None,
) -> bool:
    """Send a formatted enrichment run summary."""
    message = f"""*Venue Enrichment Complete*
• Processed: {processed}
• Updated: {updated}
• Failed: {failed}
• Still missing data: {remaining}"""

    return send_message(message, webhook_url=webhook_url)


def send_discovery_summary(city: str, found: int, webhook_url: Optional[str] = None) -> bool:
    """Send a formatted discovery run summary."""
    message = f"""*Venue Discovery Complete*
• City: {city}
• New venues pending review: {found}"""

    return send_message(message, webhook_url=webhook_url)
