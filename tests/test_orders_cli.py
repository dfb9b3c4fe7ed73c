"""Tests for order, review and payout commands."""

from datetime import datetime, UTC

import pytest

from commtrack.cli.main import cli
from commtrack.domain.csv_export import parse_orders_csv
from commtrack.domain.entities import ReviewStatus
from commtrack.domain.review import ReviewService

from conftest import NOW, make_order


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


@pytest.fixture
def stored_orders(order_service):
    orders = [
        make_order(
            "SH3",
            "500.00",
            datetime(2024, 3, 12, tzinfo=UTC),
            product="unknown",
            product_name="Unknown",
            needs_review=True,
        ),
        make_order("SH2", "149.00", datetime(2024, 3, 5, tzinfo=UTC)),
        make_order("SH1", "149.00", datetime(2024, 2, 10, tzinfo=UTC)),
    ]
    order_service.save_orders(orders, last_updated=NOW)
    return orders


def test_orders_view_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "orders", "view")

    assert result.exit_code == 0
    assert "No orders found." in result.output


def test_orders_view(cli_runner, temp_db, stored_orders):
    result = _invoke(cli_runner, temp_db, "orders", "view")

    assert result.exit_code == 0
    assert "Found 3 order(s):" in result.output
    assert "Needs Review" in result.output
    assert result.output.index("SH3") < result.output.index("SH1")


def test_orders_view_date_range(cli_runner, temp_db, stored_orders):
    result = _invoke(
        cli_runner, temp_db, "orders", "view", "--start-date", "2024-03-01", "--end-date", "2024-03-05"
    )

    assert result.exit_code == 0
    assert "Found 1 order(s):" in result.output
    assert "SH2" in result.output


def test_orders_view_needs_review(cli_runner, temp_db, stored_orders):
    result = _invoke(cli_runner, temp_db, "orders", "view", "--needs-review")

    assert "Found 1 order(s):" in result.output
    assert "SH3" in result.output


def test_orders_view_rejects_conflicting_periods(cli_runner, temp_db, stored_orders):
    result = _invoke(cli_runner, temp_db, "orders", "view", "--ytd", "--this-month")

    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_orders_export_stdout(cli_runner, temp_db, stored_orders):
    result = _invoke(cli_runner, temp_db, "orders", "export")

    assert result.exit_code == 0
    rows = parse_orders_csv(result.output)
    assert [r["order_id"] for r in rows] == ["SH3", "SH2", "SH1"]


def test_orders_export_file(cli_runner, temp_db, stored_orders, tmp_path):
    path = tmp_path / "orders.csv"
    result = _invoke(cli_runner, temp_db, "orders", "export", "-o", str(path))

    assert result.exit_code == 0
    assert "Exported 3 order(s)" in result.output
    assert path.read_text(encoding="utf-8").startswith('"Date","Order ID"')


def test_orders_reclassify(cli_runner, temp_db, stored_orders):
    result = _invoke(cli_runner, temp_db, "catalog", "add", "big", "Big Bundle", "--price", "500")
    assert result.exit_code == 0

    result = _invoke(cli_runner, temp_db, "orders", "reclassify")

    assert result.exit_code == 0
    assert "SH3: Big Bundle" in result.output


def test_review_workflow(cli_runner, temp_db, stored_orders):
    result = _invoke(cli_runner, temp_db, "review", "list")
    assert "1 order(s) flagged for review:" in result.output

    result = _invoke(cli_runner, temp_db, "review", "open", "SH3")
    assert "Order SH3 review is pending" in result.output

    result = _invoke(cli_runner, temp_db, "review", "approve", "SH3", "--product", "goldie")
    assert result.exit_code == 0
    assert "Approved order SH3 as 'goldie'" in result.output
    assert ReviewService(temp_db).get_status("SH3") == ReviewStatus.APPROVED

    result = _invoke(cli_runner, temp_db, "review", "list")
    assert "No orders need review." in result.output

    result = _invoke(cli_runner, temp_db, "review", "list", "--all")
    assert "approved" in result.output

    result = _invoke(cli_runner, temp_db, "review", "dismiss", "SH3")
    assert result.exit_code == 1
    assert "already approved" in result.output


def test_review_unflagged_order(cli_runner, temp_db, stored_orders):
    result = _invoke(cli_runner, temp_db, "review", "dismiss", "SH1")

    assert result.exit_code == 1
    assert "does not need review" in result.output


def test_summary_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "summary")

    assert result.exit_code == 0
    assert "No orders found." in result.output


def test_summary(cli_runner, temp_db, stored_orders):
    result = _invoke(cli_runner, temp_db, "summary")

    assert result.exit_code == 0
    assert "Commission Summary:" in result.output
    assert "Mar 2024" in result.output
    assert "Goldie" in result.output
    assert "Trend" in result.output


def test_summary_empty_period(cli_runner, temp_db, stored_orders):
    result = _invoke(
        cli_runner, temp_db, "summary", "--start-date", "2023-01-01", "--end-date", "2023-01-31"
    )

    assert result.exit_code == 0
    assert "No orders in the selected period." in result.output
    assert "Growth (all time):" in result.output


def test_payout_create_and_list(cli_runner, temp_db, stored_orders):
    result = _invoke(
        cli_runner,
        temp_db,
        "payout",
        "create",
        "--start-date",
        "2024-03-01",
        "--end-date",
        "2024-03-31",
        "--amount",
        "97.35",
    )
    assert result.exit_code == 0
    assert "of $97.35 covering 2 order(s)" in result.output

    result = _invoke(
        cli_runner,
        temp_db,
        "payout",
        "create",
        "--start-date",
        "2024-03-15",
        "--end-date",
        "2024-04-15",
        "--amount",
        "10",
    )
    assert result.exit_code == 0
    assert "Warning: period overlaps payout" in result.output

    result = _invoke(cli_runner, temp_db, "payout", "list")
    assert "Total paid" in result.output
    assert "$107.35" in result.output


def test_payout_rejects_inverted_period(cli_runner, temp_db):
    result = _invoke(
        cli_runner,
        temp_db,
        "payout",
        "create",
        "--start-date",
        "2024-03-31",
        "--end-date",
        "2024-03-01",
        "--amount",
        "10",
    )

    assert result.exit_code == 1
    assert "is after end" in result.output


def test_payout_list_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "payout", "list")
    assert "No payouts recorded." in result.output
