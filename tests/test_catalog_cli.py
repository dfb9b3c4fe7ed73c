"""Tests for catalog and config commands."""

from decimal import Decimal

from commtrack.cli.main import cli
from commtrack.domain.catalog import CatalogService


def _invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_catalog_list_empty(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "catalog", "list")

    assert result.exit_code == 0
    assert "No catalog entries found" in result.output


def test_catalog_add_and_list(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db, "catalog", "add", "goldie", "Goldie", "--price", "$149", "--tolerance", "10"
    )
    assert result.exit_code == 0
    assert "Added 'goldie' matching $139.00 - $159.00" in result.output

    result = _invoke(cli_runner, temp_db, "catalog", "list")
    assert "goldie" in result.output
    assert "$139.00 - $159.00" in result.output


def test_catalog_add_duplicate(cli_runner, temp_db, sample_catalog):
    result = _invoke(cli_runner, temp_db, "catalog", "add", "goldie", "Goldie", "--price", "149")

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_catalog_add_invalid_price(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "catalog", "add", "mat", "Mat", "--price=-5")

    assert result.exit_code == 1
    assert "must not be negative" in result.output


def test_catalog_remove(cli_runner, temp_db, sample_catalog):
    result = _invoke(cli_runner, temp_db, "catalog", "remove", "goldie")
    assert result.exit_code == 0
    assert "Removed catalog entry 'goldie'" in result.output

    result = _invoke(cli_runner, temp_db, "catalog", "remove", "goldie")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_config_show_defaults(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "config", "show")

    assert result.exit_code == 0
    assert "Accessory threshold: $100.00" in result.output
    assert "Commission rate: 15.00%" in result.output


def test_config_set_values(cli_runner, temp_db):
    assert _invoke(cli_runner, temp_db, "config", "set-threshold", "80").exit_code == 0
    result = _invoke(cli_runner, temp_db, "config", "set-rate", "0.2")
    assert result.exit_code == 0
    assert "Commission rate set to 20.00%" in result.output

    settings = CatalogService(temp_db).get_settings()
    assert settings["accessory_threshold"] == Decimal("80")
    assert settings["commission_rate"] == Decimal("0.2")


def test_config_rejects_rate_above_one(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "config", "set-rate", "15")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_help_does_not_need_database(cli_runner, tmp_path):
    result = cli_runner.invoke(cli, ["--db-path", str(tmp_path / "x.db"), "--help"])

    assert result.exit_code == 0
    assert "commission" in result.output.lower()
    assert not (tmp_path / "x.db").exists()
