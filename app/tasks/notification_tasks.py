# app/tasks/notification_tasks.py
import asyncio
from typing import List, Optional

from celery import shared_task

from app.tasks.celery_app import celery_app  # noqa: F401

from app.services.whatsapp_service import whatsapp_service
import logging

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def broadcast_whatsapp_task(
    self,
    recipients: List[str],
    template_name: str,
    variables: Optional[List[str]] = None,
):
    """
    WhatsApp template broadcast.
    Per-recipient failures are reported in the result; only a transport-level
    failure of the whole batch is retried.
    """
    try:
        results = asyncio.run(
            whatsapp_service.broadcast_template_message(recipients, template_name, variables or [])
        )
    except Exception as e:
        logger.error(f"WhatsApp broadcast '{template_name}' failed: {e}")
        raise self.retry(exc=e, countdown=60)

    failed = [r["recipient_phone"] for r in results if r["status"] != "success"]
    if failed:
        logger.warning(f"WhatsApp broadcast '{template_name}' failed for {len(failed)} recipients")
    return results
