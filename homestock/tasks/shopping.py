"""Celery tasks feeding the shopping list from stock triggers."""

import logging

from kombu.exceptions import OperationalError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homestock.celery_app import app as celery_app
from homestock.database import SessionLocal
from homestock.services.shopping import ShoppingService
from homestock.services.stock import ShoppingListTrigger

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3, default_retry_delay=10)
def add_low_stock_item(self, payload: dict) -> dict:
    """Turn a low-stock trigger into a shopping list entry.

    Args:
        payload: ``ShoppingListTrigger.to_payload()`` output

    Returns:
        dict describing whether an entry was added
    """
    trigger = ShoppingListTrigger.from_payload(payload)
    db: Session = SessionLocal()
    try:
        entry = ShoppingService(db).handle_low_stock_trigger(trigger)
        if entry is None:
            return {"added": False, "consumable_id": trigger.consumable_id}

        logger.info(
            f"Added {entry.item_name} x{entry.quantity} to list {entry.shopping_list_id}"
        )
        return {
            "added": True,
            "consumable_id": trigger.consumable_id,
            "entry_id": entry.id,
            "shopping_list_id": entry.shopping_list_id,
        }

    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to add restock entry for consumable {trigger.consumable_id}: {e}")
        raise self.retry(exc=e) from e

    finally:
        db.close()


def enqueue_low_stock_trigger(trigger: ShoppingListTrigger) -> None:
    """Hand a stock trigger to the worker without failing the adjustment."""
    try:
        add_low_stock_item.delay(trigger.to_payload())
    except OperationalError as e:
        logger.error(f"Could not queue restock for consumable {trigger.consumable_id}: {e}")
