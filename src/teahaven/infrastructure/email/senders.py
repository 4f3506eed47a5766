"""NotificationSender implementations: SMTP, and a logging stand-in."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from teahaven.application.notifications import (
    NotificationSender,
    OrderSummary,
    SellerNotification,
    SummaryItem,
)

logger = logging.getLogger(__name__)


def _item_line(item: SummaryItem) -> str:
    return f"- {item.product_name} x{item.quantity} @ {item.unit_price}"


def render_customer_confirmation(summary: OrderSummary) -> tuple[str, str]:
    """Return ``(subject, body)`` for the customer's confirmation email."""
    lines = [
        f"Hi {summary.customer.full_name},",
        "",
        f"Thank you for shopping at Tea Haven! Your order #{summary.order_id} "
        f"is now {summary.status.lower()}.",
        "",
        "Items:",
        *(_item_line(item) for item in summary.items),
        "",
        f"Total: {summary.total_amount}",
        f"Shipping to: {summary.shipping_address}",
        "",
        "We will update you as soon as your items ship.",
        "",
        "Best regards,",
        "Tea Haven Team",
    ]
    return f"Tea Haven Order Confirmation #{summary.order_id}", "\n".join(lines)


def render_seller_notification(notification: SellerNotification) -> tuple[str, str]:
    """Return ``(subject, body)`` for one seller's new-order email."""
    lines = [
        f"Hello {notification.seller.full_name},",
        "",
        f"A new order (#{notification.order_id}) includes your products.",
        "",
        "Items:",
        *(_item_line(item) for item in notification.items),
        "",
        f"Ship to: {notification.shipping_address}",
        "",
        "Please prepare the items for shipment.",
        "",
        "Tea Haven Platform",
    ]
    subject = f"New order #{notification.order_id} from {notification.customer.full_name}"
    return subject, "\n".join(lines)


class SmtpNotificationSender(NotificationSender):
    """Delivers notifications through an SMTP relay, one connection per message."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        from_address: str,
        timeout: float = 30.0,
    ) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._from = from_address
        self._timeout = timeout

    def send_customer_confirmation(self, summary: OrderSummary) -> None:
        subject, body = render_customer_confirmation(summary)
        self._send(summary.customer.email, subject, body)

    def send_seller_notification(self, notification: SellerNotification) -> None:
        subject, body = render_seller_notification(notification)
        self._send(notification.seller.email, subject, body)

    def _send(self, to: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = self._from
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)

        # Port 465 speaks TLS from the first byte; anything else upgrades with STARTTLS.
        if self._port == 465:
            smtp: smtplib.SMTP = smtplib.SMTP_SSL(self._host, self._port, timeout=self._timeout)
        else:
            smtp = smtplib.SMTP(self._host, self._port, timeout=self._timeout)
        with smtp:
            if self._port != 465:
                smtp.starttls()
            smtp.login(self._user, self._password)
            smtp.send_message(message)
        logger.info("Email sent to %s: %s", to, subject)


class LoggingNotificationSender(NotificationSender):
    """Used when SMTP is not configured: records what would have been sent."""

    def send_customer_confirmation(self, summary: OrderSummary) -> None:
        subject, _ = render_customer_confirmation(summary)
        logger.info("Email outbound skipped (to %s): %s", summary.customer.email, subject)

    def send_seller_notification(self, notification: SellerNotification) -> None:
        subject, _ = render_seller_notification(notification)
        logger.info("Email outbound skipped (to %s): %s", notification.seller.email, subject)
