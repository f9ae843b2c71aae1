# organs/tasks.py
"""
Celery tasks for match notification delivery
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone

from organs.models import Notification

logger = logging.getLogger(__name__)


@shared_task
def deliver_notification(notification_id):
    """
    Email one in-app notification to its recipient and stamp delivered_at.
    Failures are logged; the notification stays undelivered for a later retry.
    """
    try:
        notification = Notification.objects.get(id=notification_id)
    except Notification.DoesNotExist:
        logger.warning(f"Notification {notification_id} not found, nothing to deliver")
        return f"Notification {notification_id} not found"

    if notification.delivered_at:
        return f"Notification {notification_id} already delivered"

    if not notification.recipient_email:
        return f"Notification {notification_id} has no recipient email"

    try:
        send_mail(
            subject=f"[{notification.priority_level.upper()}] {notification.title}",
            message=build_notification_email(notification),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[notification.recipient_email],
            fail_silently=False,
        )
    except Exception:
        logger.exception(f"Email delivery failed for notification {notification_id}")
        return f"Delivery failed for notification {notification_id}"

    notification.delivered_at = timezone.now()
    notification.save(update_fields=['delivered_at'])

    logger.info(f"Notification {notification_id} emailed to {notification.recipient_email}")
    return f"Delivered notification {notification_id}"


def build_notification_email(notification):
    metadata = notification.metadata or {}
    return f"""
{notification.message}

Patient: {notification.related_patient_name or 'N/A'}
Compatibility: {metadata.get('compatibility_score', 'N/A')}%
HLA matches: {metadata.get('hla_matches', 'N/A')}/6
Priority rank: #{metadata.get('priority_rank', 'N/A')}

Review the match: {settings.SITE_URL}{notification.action_url}

This ranking is decision support only and must be reviewed by the transplant team.
OrganLink
    """.strip()
