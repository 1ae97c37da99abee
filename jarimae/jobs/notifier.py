"""Hands committed reservation events to background jobs"""

import structlog

from jarimae.models.reservation import ReservationStatus

logger = structlog.get_logger()


class ReservationNotifier:
    """Enqueues Celery tasks for reservation events.

    Called only after the reservation change is committed. A broker outage
    is logged and never rolls back the reservation.
    """

    def reservation_created(self, reservation) -> None:
        from jarimae.jobs.tasks import notify_owner_new_reservation

        self._enqueue(notify_owner_new_reservation, str(reservation.id))

    def status_changed(self, reservation, previous: ReservationStatus) -> None:
        from jarimae.jobs.tasks import notify_reservation_status, recalculate_store_stats

        self._enqueue(notify_reservation_status, str(reservation.id))
        if reservation.status == ReservationStatus.COMPLETED:
            self._enqueue(recalculate_store_stats, str(reservation.store_id))

    def review_created(self, review) -> None:
        from jarimae.jobs.tasks import recalculate_store_stats

        self._enqueue(recalculate_store_stats, str(review.store_id))

    def _enqueue(self, task, *args) -> None:
        try:
            task.delay(*args)
        except Exception as e:
            logger.error("Failed to enqueue task", task=task.name, args=args, error=str(e))


def get_notifier() -> ReservationNotifier:
    """FastAPI dependency; overridden in tests"""
    return ReservationNotifier()
