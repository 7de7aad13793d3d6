import logging

from sqlalchemy.exc import SQLAlchemyError

from order_webhook.errors import PersistenceError
from order_webhook.models import CustomPlan, Order

logger = logging.getLogger(__name__)


class OrderStore:
    """Order and custom plan writes, one session and commit per call."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def create_order(self, **fields) -> Order:
        db = self.session_factory()
        try:
            order = Order(**fields)
            db.add(order)
            db.commit()
            db.refresh(order)
            db.expunge(order)
            return order
        except SQLAlchemyError as exc:
            db.rollback()
            raise PersistenceError(f"Could not save order: {exc}") from exc
        finally:
            db.close()

    def mark_custom_plan_paid(self, custom_plan_id: str) -> bool:
        """Set the plan's payment status to paid.

        Returns False when no plan has that id.
        """
        db = self.session_factory()
        try:
            updated = (
                db.query(CustomPlan)
                .filter_by(id=custom_plan_id)
                .update({CustomPlan.payment_status: "paid"}, synchronize_session=False)
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise PersistenceError(
                f"Could not update custom plan {custom_plan_id}: {exc}"
            ) from exc
        finally:
            db.close()

        if not updated:
            logger.warning("CustomPlan %s not found, paymentStatus left unchanged", custom_plan_id)
            return False
        return True
