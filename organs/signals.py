# organs/signals.py
"""
Hand newly created match notifications to the email delivery task
"""
import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver
from kombu.exceptions import OperationalError

from organs.models import Notification
from organs.tasks import deliver_notification

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Notification)
def queue_notification_delivery(sender, instance, created, **kwargs):
    """
    Schedule email delivery once the surrounding transaction commits, so a
    rolled-back matching run never emails anyone.
    """
    if created and instance.recipient_email:
        notification_id = instance.id
        transaction.on_commit(lambda: send_to_worker(notification_id))
        logger.debug(f"Delivery queued for notification #{notification_id}")


def send_to_worker(notification_id):
    """Publish one delivery job. An unreachable broker leaves the notification undelivered."""
    try:
        deliver_notification.delay(notification_id)
    except OperationalError:
        logger.exception(f"Could not queue delivery of notification #{notification_id}, broker unavailable")
