"""
Aggregation tests: per-supplier summary and grouped daily totals.
"""
from datetime import date, datetime, timedelta

from backend.models.leaf_collection import LeafType
from backend.services import aggregation
from backend.services.collection_entries import (
    CollectionKey, Deduction, RawCollection, entry_from_row,
)

KEY = CollectionKey(reg_no=101, leaf_type=LeafType.NORMAL)
DAY = datetime(2025, 3, 10, 8, 15)


# ===================== PURE SUMMARY =====================


def test_summarize_entries_empty_is_all_zero():
    summary = aggregation.summarize_entries([])
    assert all(v == 0 for v in summary.to_dict().values())
    assert summary.transaction_count == 0


def test_summarize_entries_keeps_raw_and_deduction_totals_apart():
    entries = [
        RawCollection(KEY, quantity=5, gross_weight=100, net_weight=90),
        RawCollection(KEY, quantity=3, gross_weight=60, net_weight=55),
        Deduction(KEY, coarse=10, water=5, bag_weight=2),
        Deduction(KEY, rejected=1.5, boiled=0.5),
    ]
    summary = aggregation.summarize_entries(entries)

    assert summary.total_bags == 8
    assert summary.total_gross == 160
    assert summary.total_net_weight == 145
    assert summary.total_coarse == 10
    assert summary.total_water == 5
    assert summary.total_bag_weight == 2
    assert summary.total_rejected == 1.5
    assert summary.total_boiled == 0.5
    assert summary.transaction_count == 2


def test_entry_from_row_picks_shape_from_flag(make_raw, make_deduction):
    raw = entry_from_row(make_raw(qty=4, gross=80, net_weight=70, route="  Kandedola "))
    assert isinstance(raw, RawCollection)
    assert raw.quantity == 4
    assert raw.key.route == "Kandedola"

    deduction = entry_from_row(make_deduction(water=3, coarse=2, transfer=1))
    assert isinstance(deduction, Deduction)
    assert deduction.total() == 6


# ===================== DB SUMMARY =====================


async def test_summarize_end_to_end(db_session, add_rows, make_raw, make_deduction):
    now = datetime.now()
    await add_rows(
        make_raw(qty=5, gross=100, net_weight=90, log_time=now),
        make_raw(qty=3, gross=60, net_weight=55, log_time=now),
        make_deduction(coarse=10, water=5, log_time=now),
        # different supplier / leaf type / day
        make_raw(reg_no=202, qty=9, gross=999, log_time=now),
        make_raw(qty=7, gross=70, leaf_type=LeafType.SUPER, log_time=now),
        make_deduction(coarse=50, log_time=now - timedelta(days=1)),
    )

    summary = await aggregation.summarize(db_session, 101, LeafType.NORMAL, date.today())

    assert summary.total_bags == 8
    assert summary.total_gross == 160
    assert summary.total_coarse == 10
    assert summary.total_water == 5
    assert summary.total_net_weight == 145
    assert summary.transaction_count == 1


async def test_summarize_without_rows_is_zero(db_session):
    summary = await aggregation.summarize(db_session, 101, LeafType.SUPER)
    assert summary.to_dict() == {
        "TotalBags": 0,
        "TotalGross": 0.0,
        "TotalBagWeight": 0.0,
        "TotalCoarse": 0.0,
        "TotalWater": 0.0,
        "TotalBoiled": 0.0,
        "TotalRejected": 0.0,
        "TotalNetWeight": 0.0,
        "TransactionCount": 0,
    }


async def test_summarize_for_explicit_day(db_session, add_rows, make_raw):
    await add_rows(make_raw(qty=2, gross=40, net_weight=38, log_time=DAY))

    summary = await aggregation.summarize(db_session, 101, LeafType.NORMAL, DAY.date())
    assert summary.total_bags == 2

    other_day = await aggregation.summarize(db_session, 101, LeafType.NORMAL, DAY.date() + timedelta(days=1))
    assert other_day.total_bags == 0


# ===================== GROUPED TOTALS =====================


async def test_grouped_totals_trim_routes_and_count_sources(db_session, add_rows, make_raw, make_deduction):
    await add_rows(
        make_raw(qty=5, gross=100, net_weight=90, route="Kandedola ", log_time=DAY),
        make_raw(qty=3, gross=60, net_weight=55, route=" Kandedola", log_time=DAY + timedelta(hours=1)),
        make_deduction(coarse=10, water=5, route="Kandedola", log_time=DAY + timedelta(hours=2)),
        make_raw(reg_no=202, dealer="S. Silva", qty=1, gross=20, net_weight=18, route="Hapugasthenna",
                 log_time=DAY + timedelta(hours=3)),
    )

    groups = await aggregation.grouped_totals(db_session, DAY.date())

    assert len(groups) == 2
    # newest group first
    assert groups[0]["RegNo"] == 202
    kandedola = groups[1]
    assert kandedola["Route"] == "Kandedola"
    assert kandedola["LeafType"] == "Normal"
    assert kandedola["TotalBags"] == 8
    assert kandedola["TotalGross"] == 160
    assert kandedola["NetWeight"] == 145
    assert kandedola["TotalCoarce"] == 10
    assert kandedola["TotalWater"] == 5
    assert kandedola["TransactionCount"] == 1
    assert kandedola["AppCount"] == 1
    assert kandedola["WebCount"] == 2
    assert kandedola["DisplayDate"] == "10/03/2025"
    assert kandedola["DisplayTime"] == "10:15 AM"


async def test_grouped_totals_other_day_is_empty(db_session, add_rows, make_raw):
    await add_rows(make_raw(qty=5, gross=100, log_time=DAY))
    assert await aggregation.grouped_totals(db_session, date(2025, 3, 11)) == []


async def test_filtered_totals_by_route_and_range(db_session, add_rows, make_raw):
    await add_rows(
        make_raw(qty=5, gross=100, route="Kandedola", log_time=DAY),
        make_raw(reg_no=202, qty=1, gross=20, route="Hapugasthenna", log_time=DAY),
        make_raw(qty=2, gross=40, route="Kandedola", log_time=DAY - timedelta(days=5)),
    )

    groups = await aggregation.filtered_totals(db_session, route="kande")
    assert [g["TotalBags"] for g in groups] == [7]

    groups = await aggregation.filtered_totals(db_session, start_date=DAY.date(), end_date=DAY.date())
    assert sorted(g["RegNo"] for g in groups) == [101, 202]

    groups = await aggregation.filtered_totals(db_session, reg_no=202)
    assert len(groups) == 1
    assert groups[0]["Route"] == "Hapugasthenna"


async def test_collection_details_newest_first(db_session, add_rows, make_raw, make_deduction):
    await add_rows(
        make_raw(qty=5, gross=100, log_time=DAY),
        make_deduction(water=2, log_time=DAY + timedelta(minutes=30)),
    )

    rows = await aggregation.collection_details(db_session, 101)

    assert [r["IsDeduction"] for r in rows] == [True, False]
    assert rows[0]["Source"] == "Mobile App"
    assert rows[1]["Source"] == "Web System"
    assert rows[1]["Bags"] == 5
