"""
Showroom Follow-up Scheduler - Daily summary of overdue orders waiting at the shop
"""
import asyncio
from datetime import date
from typing import Dict, Optional
import logging

from app.core.config import settings
from app.core.database import SessionLocal
from app.services import ShowroomService

logger = logging.getLogger(__name__)

# Global scheduler instance
_scheduler = None


def collect_overdue(today: Optional[date] = None) -> Dict:
    """Count overdue showroom orders and the balance still owed on them"""
    db = SessionLocal()
    try:
        rows = ShowroomService.list_orders(db, today=today)
        overdue = [r for r in rows if r["delay_in_days"] > 0]
        summary = {
            "showroom": len(rows),
            "overdue": len(overdue),
            "outstanding_balance": float(sum(r["balance"] for r in overdue)),
            "worst_delay": max((r["delay_in_days"] for r in overdue), default=0),
        }
        for r in overdue:
            order = r["order"]
            if not order.r1_date:
                logger.info(f"Order {order.id} overdue {r['delay_in_days']}d with no first reminder")
        return summary
    finally:
        db.close()


class ShowroomFollowupScheduler:
    """
    Runs the overdue showroom check once a day
    """

    def __init__(self):
        from apscheduler.schedulers.asyncio import AsyncIOScheduler
        self.scheduler = AsyncIOScheduler()
        self.is_running = False

    def start(self):
        """Start the scheduler"""
        if not self.is_running:
            from apscheduler.triggers.cron import CronTrigger
            self.scheduler.add_job(
                func=self._run_followup,
                trigger=CronTrigger(hour=settings.FOLLOWUP_HOUR, minute=0),
                id='showroom_followup',
                name='Showroom overdue follow-up',
                replace_existing=True
            )
            self.scheduler.start()
            self.is_running = True
            logger.info(f"Showroom follow-up scheduled daily at {settings.FOLLOWUP_HOUR:02d}:00")

    def stop(self):
        """Stop the scheduler"""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Showroom follow-up scheduler stopped")

    def _run_followup(self):
        """Runs in the scheduler thread pool"""
        try:
            summary = collect_overdue()
        except Exception as e:
            logger.error(f"Showroom follow-up failed: {e}", exc_info=True)
            return
        logger.info(
            f"Showroom follow-up: {summary['overdue']}/{summary['showroom']} overdue, "
            f"outstanding={summary['outstanding_balance']:.3f}, worst delay={summary['worst_delay']}d"
        )


def get_scheduler() -> "ShowroomFollowupScheduler":
    """Get or create the global scheduler instance"""
    global _scheduler
    if _scheduler is None:
        _scheduler = ShowroomFollowupScheduler()
    return _scheduler


def start_scheduler():
    """Start the global scheduler"""
    scheduler = get_scheduler()
    scheduler.start()


def stop_scheduler():
    """Stop the global scheduler"""
    global _scheduler
    if _scheduler:
        _scheduler.stop()
        _scheduler = None


# ========== CLI Commands ==========

if __name__ == "__main__":
    """
    Run standalone:
    python -m app.jobs.showroom_followup          # scheduler
    python -m app.jobs.showroom_followup now      # one-time summary
    """
    import sys
    from app.core.logging import setup_logging

    setup_logging(log_file="followup.log")

    if len(sys.argv) > 1 and sys.argv[1] == "now":
        logger.info(f"Showroom summary: {collect_overdue()}")
    else:
        print("Starting showroom follow-up scheduler...")
        print("Press Ctrl+C to stop")

        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            start_scheduler()
            loop.run_forever()
        except KeyboardInterrupt:
            stop_scheduler()
            print("Scheduler stopped")
