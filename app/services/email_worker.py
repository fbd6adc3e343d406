"""Email worker for processing the outbox queue via Resend API."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import httpx
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.schemas.notifications import EmailOutbox

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


async def _send_via_resend(
    client: httpx.AsyncClient,
    *,
    to: str,
    subject: str,
    body: str,
) -> bool:
    """Send an email via the Resend API.

    Args:
        client: Shared HTTP client for the batch.
        to: Recipient email address.
        subject: Email subject line.
        body: Plain text email body.

    Returns:
        True if the email was sent successfully, False otherwise.
    """
    try:
        response = await client.post(
            RESEND_EMAILS_URL,
            headers={
                "Authorization": f"Bearer {settings.resend_api_key}",
                "Content-Type": "application/json",
            },
            json={
                "from": settings.email_from_address,
                "to": [to],
                "subject": subject,
                "text": body,
            },
            timeout=30.0,
        )
    except httpx.RequestError as exc:
        logger.error("HTTP error sending email to %s: %s", to, exc)
        return False

    if response.status_code == 200:
        logger.info("Email sent successfully to %s", to)
        return True
    logger.error(
        "Failed to send email to %s: %s %s",
        to,
        response.status_code,
        response.text,
    )
    return False


async def send_pending_emails(
    db: AsyncSession,
    *,
    batch_size: int = 10,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Process pending emails from the outbox.

    Each sent email is marked in its own transaction, so a failure part way
    through a batch never re-sends the emails already delivered.

    Args:
        db: Database session (no transaction open).
        batch_size: Maximum number of emails to process in this batch.
        transport: Optional httpx transport override.

    Returns:
        Number of emails successfully sent.
    """
    if not settings.resend_api_key:
        logger.warning("Resend API key not configured, leaving outbox untouched")
        return 0

    async with db.begin():
        result = await db.execute(
            select(EmailOutbox)
            .where(EmailOutbox.sent_at.is_(None))  # type: ignore[union-attr]
            .order_by(
                EmailOutbox.created_at,  # type: ignore[arg-type]
                EmailOutbox.id,  # type: ignore[arg-type]
            )
            .limit(batch_size)
        )
        emails = list(result.scalars().all())

    sent_count = 0
    async with httpx.AsyncClient(transport=transport) as client:
        for email in emails:
            if email.id is None:
                continue

            success = await _send_via_resend(
                client,
                to=email.to_email,
                subject=email.subject,
                body=email.body,
            )
            if not success:
                continue

            async with db.begin():
                await db.execute(
                    update(EmailOutbox)
                    .where(EmailOutbox.id == email.id)  # type: ignore[arg-type]
                    .values(
                        sent_at=datetime.now(UTC).replace(tzinfo=None),
                        provider="resend",
                    )
                )
            sent_count += 1

    return sent_count
