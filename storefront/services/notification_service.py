# storefront/services/notification_service.py
from celery.exceptions import CeleryError
from kombu.exceptions import KombuError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Queues customer notifications on Celery.
    Called after the order transaction committed, so a broker outage is
    logged and never undoes or fails the order.
    """

    def send_order_placed(self, user_id: int, order_id: int) -> bool:
        try:
            send_order_placed_task.delay(user_id, order_id)
            return True
        except (CeleryError, KombuError, OSError) as e:
            logger.error(f"Could not queue notification for order {order_id}: {e}")
            return False


@celery_app.task(name="storefront.services.notification_service.send_order_placed_task")
def send_order_placed_task(user_id: int, order_id: int):
    """
    Celery task; the delivery channel (email/push) lives outside this service,
    here the event is only logged.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} placed, status pending")

    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
