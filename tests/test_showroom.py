"""
Showroom follow-up: listing, reminders, overdue summary
"""
import inspect
import logging
from datetime import date, datetime, timedelta

from app.jobs import showroom_followup
from app.models import Order
from app.services import ShowroomService


def test_delay_is_never_negative():
    today = date(2024, 5, 10)
    assert ShowroomService.delay_in_days(datetime(2024, 5, 7, 18, 0), today) == 3
    assert ShowroomService.delay_in_days(datetime(2024, 5, 12), today) == 0
    assert ShowroomService.delay_in_days(None, today) == 0


def test_list_orders_most_overdue_first(db_session, make_customer, make_order):
    customer = make_customer()
    now = datetime.now()
    late = make_order(customer, production_stage="final_at_shop", delivery_date=now - timedelta(days=5))
    recent = make_order(customer, production_stage="brova_at_shop", delivery_date=now - timedelta(days=1))
    make_order(customer, production_stage="order_at_shop", delivery_date=now - timedelta(days=9))

    rows = ShowroomService.list_orders(db_session)

    assert [r["order"].id for r in rows] == [late.id, recent.id]


def test_record_reminder_sets_fields(db_session, make_customer, make_order):
    order = make_order(make_customer(), production_stage="final_at_shop")
    when = datetime(2024, 5, 10, 11, 0)

    ok, _ = ShowroomService.record_reminder(db_session, order.id, "call", when, "Will collect Friday")

    order = db_session.get(Order, order.id)
    assert ok
    assert order.call_reminder_date == when
    assert order.call_notes == "Will collect Friday"


def test_stage_update_rejects_unknown_stage(db_session, make_customer, make_order):
    order = make_order(make_customer())
    ok, _ = ShowroomService.update_production_stage(db_session, order.id, "on_the_moon")
    assert not ok


def test_collect_overdue_summary(db_session, make_customer, make_order, monkeypatch):
    customer = make_customer()
    now = datetime.now()
    make_order(customer, production_stage="final_at_shop", delivery_date=now - timedelta(days=4),
               order_total=30, paid=10)
    make_order(customer, production_stage="brova_at_shop", delivery_date=now + timedelta(days=2),
               order_total=12, paid=0)
    monkeypatch.setattr(showroom_followup, "SessionLocal", lambda: db_session)

    summary = showroom_followup.collect_overdue()

    assert summary == {"showroom": 2, "overdue": 1, "outstanding_balance": 20.0, "worst_delay": 4}


def test_followup_job_is_a_plain_function(monkeypatch, caplog):
    summary = {"showroom": 3, "overdue": 2, "outstanding_balance": 12.5, "worst_delay": 6}
    monkeypatch.setattr(showroom_followup, "collect_overdue", lambda: summary)
    scheduler = showroom_followup.ShowroomFollowupScheduler()

    assert not inspect.iscoroutinefunction(scheduler._run_followup)
    with caplog.at_level(logging.INFO, logger="app.jobs.showroom_followup"):
        scheduler._run_followup()

    assert "2/3 overdue" in caplog.text
