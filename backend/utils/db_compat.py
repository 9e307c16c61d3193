"""
Query helpers that behave the same on SQLite, PostgreSQL and SQL Server.
"""
from datetime import date, datetime, time, timedelta

from sqlalchemy import and_, func


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def on_day(column, day: date):
    """Filter: datetime column falls on the given calendar day."""
    start = day_start(day)
    return and_(column >= start, column < start + timedelta(days=1))


def from_day(column, day: date):
    """Filter: datetime column is on or after the given day."""
    return column >= day_start(day)


def through_day(column, day: date):
    """Filter: datetime column is on or before the given day (inclusive)."""
    return column < day_start(day) + timedelta(days=1)


def trimmed(column):
    """Leading/trailing whitespace stripped; route names are stored inconsistently."""
    return func.trim(column)
