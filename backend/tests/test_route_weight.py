"""
Route net weight and month-label parsing tests.
"""
from datetime import date, datetime

import pytest

from backend.services import route_weight
from backend.utils.helpers import parse_month_label

ON_DAY = datetime(2025, 1, 15, 7, 40)


@pytest.mark.parametrize("label,expected", [
    ("Jan-2025", (1, 2025)),
    ("Dec-2024", (12, 2024)),
    ("Foo-2025", None),
    ("Jan2025", None),
    ("Jan-", None),
    ("", None),
    (None, None),
])
def test_parse_month_label(label, expected):
    assert parse_month_label(label) == expected


def test_resolve_route_date():
    assert route_weight.resolve_route_date(15, "Jan-2025") == date(2025, 1, 15)
    assert route_weight.resolve_route_date("5", "Mar-2024") == date(2024, 3, 5)
    assert route_weight.resolve_route_date(30, "Feb-2025") is None
    assert route_weight.resolve_route_date(15, "Foo-2025") is None
    assert route_weight.resolve_route_date("x", "Jan-2025") is None
    assert route_weight.resolve_route_date("inf", "Jan-2025") is None
    assert route_weight.resolve_route_date("nan", "Jan-2025") is None
    assert route_weight.resolve_route_date("1e300", "Jan-2025") is None


async def test_route_net_weight_nets_every_deduction_field(db_session, add_rows, make_raw, make_deduction):
    await add_rows(
        make_raw(qty=5, gross=200, route=" Kandedola ", log_time=ON_DAY),
        make_raw(reg_no=202, qty=2, gross=100, route="Kandedola", spd=4, log_time=ON_DAY),
        make_deduction(coarse=10, water=5, bag_weight=3, rejected=2, boiled=1, route="Kandedola", log_time=ON_DAY),
        make_deduction(route_deduct=6, excess_leaf=2, transfer=1, route_deduct_pre=1,
                       route="Kandedola", log_time=ON_DAY),
        # gross on a deduction row never counts
        make_deduction(gross=500, route="Kandedola", log_time=ON_DAY),
        # other route, other day
        make_raw(qty=1, gross=999, route="Hapugasthenna", log_time=ON_DAY),
        make_raw(qty=1, gross=999, route="Kandedola", log_time=datetime(2025, 1, 16, 7, 0)),
    )

    breakdown = await route_weight.route_weight_breakdown(db_session, "Kandedola ", 15, "Jan-2025")
    assert breakdown.record_count == 5
    assert breakdown.total_gross == 300
    assert breakdown.total_deductions == 35
    assert breakdown.net_weight == 265

    assert await route_weight.route_net_weight(db_session, "Kandedola", "15", "Jan-2025") == 265


async def test_route_net_weight_floors_at_zero(db_session, add_rows, make_raw, make_deduction):
    await add_rows(
        make_raw(qty=1, gross=20, log_time=ON_DAY),
        make_deduction(coarse=15, water=10, log_time=ON_DAY),
    )
    assert await route_weight.route_net_weight(db_session, "Kandedola", 15, "Jan-2025") == 0


async def test_route_net_weight_zero_for_bad_month_or_no_rows(db_session, add_rows, make_raw):
    await add_rows(make_raw(qty=1, gross=20, log_time=ON_DAY))

    assert await route_weight.route_net_weight(db_session, "Kandedola", 15, "Foo-2025") == 0
    assert await route_weight.route_net_weight(db_session, "Nowhere", 15, "Jan-2025") == 0
    assert await route_weight.route_net_weight(db_session, "Kandedola", 14, "Jan-2025") == 0
    assert await route_weight.route_net_weight(db_session, "Kandedola", "inf", "Jan-2025") == 0
    assert await route_weight.route_net_weight(db_session, "Kandedola", "nan", "Jan-2025") == 0


async def test_distinct_routes_are_trimmed_and_unique(db_session, add_rows, make_raw):
    await add_rows(
        make_raw(route="Kandedola ", log_time=ON_DAY),
        make_raw(route=" Kandedola", log_time=ON_DAY),
        make_raw(route="Hapugasthenna", log_time=ON_DAY),
        make_raw(route="   ", log_time=ON_DAY),
        make_raw(route="null", log_time=ON_DAY),
        make_raw(route=None, log_time=ON_DAY),
    )
    assert await route_weight.distinct_routes(db_session) == ["Hapugasthenna", "Kandedola"]
