"""Tests for GL actual import and rollup."""

import pytest
from farmledger.domain.entities import GlActualRow, RecordType
from farmledger.domain.errors import GlAccountNotFoundError, InvalidCategoryError, ValidationError

FISCAL_YEAR = 2025


def rows(*entries):
    return [GlActualRow(account_number=number, month=month, amount=amount) for number, month, amount in entries]


def accounting(db, farm_id, month, fiscal_year=FISCAL_YEAR):
    return db.get_monthly_record(farm_id, fiscal_year, month, RecordType.ACCOUNTING)


def test_rollup_sums_accounts_into_categories(seeded_farm, rollup_service, temp_db):
    """Test two seed accounts land in input_seed and roll up to inputs."""
    result = rollup_service.import_gl_actuals(
        seeded_farm.id,
        FISCAL_YEAR,
        rows(("5100", "Nov", 1000), ("5110", "Nov", 250), ("6200", "Nov", 400)),
    )

    assert result["months_imported"] == 1
    assert result["rows_written"] == 3
    assert result["rows_skipped"] == 0

    record = accounting(temp_db, seeded_farm.id, "Nov")
    assert record.is_actual
    assert record.data["input_seed"] == 1250
    assert record.data["inputs"] == 1250
    assert record.data["lpm_fog"] == 400
    assert record.data["lpm"] == 400
    assert record.data["input_fert"] == 0

    per_unit = temp_db.get_monthly_record(seeded_farm.id, FISCAL_YEAR, "Nov", RecordType.PER_UNIT)
    assert per_unit.is_actual
    assert per_unit.data["input_seed"] == pytest.approx(0.25)


def test_unmapped_accounts_are_excluded(seeded_farm, rollup_service, temp_db):
    """Test the unmapped grain sales account contributes nothing."""
    rollup_service.import_gl_actuals(
        seeded_farm.id, FISCAL_YEAR, rows(("4100", "Dec", 90000), ("4900", "Dec", 100))
    )
    record = accounting(temp_db, seeded_farm.id, "Dec")
    assert record.data["rev_other_income"] == 100
    assert record.data["revenue"] == 100
    assert len(temp_db.list_gl_actual_details(seeded_farm.id, FISCAL_YEAR, "Dec")) == 2


def test_unknown_accounts_are_skipped(seeded_farm, rollup_service):
    """Test rows for accounts the farm does not have are skipped."""
    result = rollup_service.import_gl_actuals(
        seeded_farm.id,
        FISCAL_YEAR,
        rows(("9999", "Nov", 5), ("5100", "Nov", 10), ("9998", "Nov", 1), ("9999", "Dec", 2)),
    )
    assert result["rows_written"] == 1
    assert result["rows_skipped"] == 3
    assert result["skipped_accounts"] == ["9998", "9999"]
    assert result["months_imported"] == 1


def test_import_invalid_month(seeded_farm, rollup_service, temp_db):
    """Test an invalid month rejects the whole batch."""
    with pytest.raises(ValidationError):
        rollup_service.import_gl_actuals(
            seeded_farm.id, FISCAL_YEAR, rows(("5100", "Nov", 10), ("5100", "Foo", 10))
        )
    assert temp_db.list_gl_actual_details(seeded_farm.id, FISCAL_YEAR) == []


def test_import_rolls_up_each_month(seeded_farm, rollup_service, temp_db):
    """Test every touched month becomes actual, untouched months do not."""
    result = rollup_service.import_gl_actuals(
        seeded_farm.id, FISCAL_YEAR, rows(("5100", "Nov", 10), ("5100", "Jan", 20))
    )
    assert result["months_imported"] == 2
    assert set(result["results"]) == {"Nov", "Jan"}
    assert accounting(temp_db, seeded_farm.id, "Jan").is_actual
    assert not accounting(temp_db, seeded_farm.id, "Dec").is_actual


def test_reimport_replaces_amounts(seeded_farm, rollup_service, temp_db):
    """Test a detail is keyed by account and month."""
    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("5100", "Nov", 1000)))
    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("5100", "Nov", 700)))

    assert accounting(temp_db, seeded_farm.id, "Nov").data["input_seed"] == 700
    assert len(temp_db.list_gl_actual_details(seeded_farm.id, FISCAL_YEAR, "Nov")) == 1


def test_rollup_is_idempotent(seeded_farm, rollup_service):
    """Test running a rollup twice gives the same numbers."""
    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("5100", "Nov", 1000)))
    first = rollup_service.rollup_gl_actuals(seeded_farm.id, FISCAL_YEAR, "Nov")
    second = rollup_service.rollup_gl_actuals(seeded_farm.id, FISCAL_YEAR, "Nov")
    assert first == second
    assert second["accounting"]["input_seed"] == 1000


def test_rollup_overwrites_planned_values(seeded_farm, calculation_service, rollup_service, temp_db):
    """Test a planned leaf with no GL activity becomes 0 once actuals arrive."""
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_fert", 10)
    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("5100", "Nov", 1000)))

    record = accounting(temp_db, seeded_farm.id, "Nov")
    assert record.data["input_fert"] == 0
    assert record.data["inputs"] == 1000


def test_rollup_keeps_ad_hoc_keys(seeded_farm, rollup_service, temp_db):
    """Test keys that are not categories survive a rollup."""
    temp_db.save_monthly_record(
        seeded_farm.id, FISCAL_YEAR, "Nov", RecordType.ACCOUNTING, {"adjustment_note": 12.0}
    )
    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("5100", "Nov", 1000)))
    assert accounting(temp_db, seeded_farm.id, "Nov").data["adjustment_note"] == 12.0


def test_rollup_without_assumption(seeded_farm, rollup_service, temp_db):
    """Test per-unit equals dollars when the year has no assumptions."""
    result = rollup_service.import_gl_actuals(seeded_farm.id, 2030, rows(("5100", "Nov", 1000)))
    assert result["results"]["Nov"]["per_unit"]["input_seed"] == 1000


def test_rollup_year(seeded_farm, rollup_service):
    """Test a year rollup covers all twelve months."""
    results = rollup_service.rollup_year(seeded_farm.id, FISCAL_YEAR)
    assert list(results)[0] == "Nov"
    assert len(results) == 12


def test_clear_year(seeded_farm, rollup_service, temp_db):
    """Test clearing removes details and resets every record."""
    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("5100", "Nov", 1000)))
    result = rollup_service.clear_year(seeded_farm.id, FISCAL_YEAR)

    assert result == {"deleted_details": 1, "reset_records": 24}
    record = accounting(temp_db, seeded_farm.id, "Nov")
    assert record.data == {}
    assert not record.is_actual


def test_bulk_assign_and_rollup(seeded_farm, gl_account_service, rollup_service, temp_db):
    """Test mapping grain sales to canola revenue re-rolls the year."""
    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("4100", "Nov", 90000)))
    assert accounting(temp_db, seeded_farm.id, "Nov").data["revenue"] == 0

    result = gl_account_service.bulk_assign(
        seeded_farm.id, [("4100", "rev_canola")], fiscal_year=FISCAL_YEAR
    )
    assert result == {"updated": 1, "skipped": [], "rolled_up": True}
    record = accounting(temp_db, seeded_farm.id, "Nov")
    assert record.data["rev_canola"] == 90000
    assert record.data["revenue"] == 90000


def test_unmapping_clears_stale_values(seeded_farm, gl_account_service, rollup_service, temp_db):
    """Test unmapping an account zeroes its former category on the next rollup."""
    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("5200", "Nov", 800)))
    gl_account_service.bulk_assign(seeded_farm.id, [("5200", None)], fiscal_year=FISCAL_YEAR)

    record = accounting(temp_db, seeded_farm.id, "Nov")
    assert record.data["input_fert"] == 0
    assert record.data["inputs"] == 0


def test_bulk_assign_skips_invalid(seeded_farm, gl_account_service):
    """Test unknown accounts, unknown and parent categories are skipped."""
    result = gl_account_service.bulk_assign(
        seeded_farm.id,
        [("0000", "input_seed"), ("5100", "inputs"), ("5110", "nope"), ("6400", "lpm_repairs")],
    )
    assert result["updated"] == 1
    assert result["rolled_up"] is False
    assert [number for number, _ in result["skipped"]] == ["0000", "5100", "5110"]
    assert "not a leaf" in result["skipped"][1][1]
    assert "unknown category" in result["skipped"][2][1]


def test_deactivate_account(seeded_farm, gl_account_service, rollup_service, temp_db):
    """Test a deactivated account is unmapped and hidden."""
    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("6400", "Nov", 75)))
    gl_account_service.deactivate_account(seeded_farm.id, "6400", fiscal_year=FISCAL_YEAR)

    numbers = [account.account_number for account in gl_account_service.list_accounts(seeded_farm.id)]
    assert "6400" not in numbers
    assert accounting(temp_db, seeded_farm.id, "Nov").data["lpm_shop"] == 0

    with pytest.raises(GlAccountNotFoundError):
        gl_account_service.deactivate_account(seeded_farm.id, "0000")


def test_add_account(seeded_farm, gl_account_service):
    """Test adding an account with and without a category."""
    account = gl_account_service.add_account(seeded_farm.id, "5400", "Inoculant", "input_seed")
    assert account.account_number == "5400"
    assert account.category_id is not None

    unmapped = gl_account_service.add_account(seeded_farm.id, "9100", "Suspense")
    assert unmapped.category_id is None

    with pytest.raises(InvalidCategoryError):
        gl_account_service.add_account(seeded_farm.id, "5500", "Bad", "inputs")
    with pytest.raises(ValidationError):
        gl_account_service.add_account(seeded_farm.id, " ", "Blank")


def test_upsert_accounts(seeded_farm, gl_account_service):
    """Test upserts rename existing accounts and ignore incomplete entries."""
    result = gl_account_service.upsert_accounts(
        seeded_farm.id,
        [
            {"account_number": "5100", "account_name": "Seed Purchases", "category_code": "input_seed"},
            {"account_number": "5600", "account_name": "Custom Work", "category_code": "missing"},
            {"account_number": "", "account_name": "No Number"},
        ],
    )
    assert len(result["saved"]) == 2
    assert result["skipped"] == [("5600", "unknown category 'missing'")]
    assert gl_account_service.get_account(seeded_farm.id, "5100").account_name == "Seed Purchases"
    assert gl_account_service.get_account(seeded_farm.id, "5600").category_id is None


def test_upsert_accounts_leaves_parent_codes_unmapped(seeded_farm, gl_account_service, rollup_service, temp_db):
    """Test an account aimed at a parent category stays unmapped."""
    result = gl_account_service.upsert_accounts(
        seeded_farm.id,
        [{"account_number": "7777", "account_name": "Misc Inputs", "category_code": "inputs"}],
    )
    assert result["skipped"] == [("7777", "not a leaf category 'inputs'")]
    assert gl_account_service.get_account(seeded_farm.id, "7777").category_id is None

    rollup_service.import_gl_actuals(seeded_farm.id, FISCAL_YEAR, rows(("7777", "Nov", 500)))
    record = accounting(temp_db, seeded_farm.id, "Nov")
    assert record.data["inputs"] == 0
    details = temp_db.list_gl_actual_details(seeded_farm.id, FISCAL_YEAR, "Nov")
    assert [detail.category_code for detail in details] == [None]


def test_rollup_ignores_deactivated_categories(seeded_farm, category_service, rollup_service, temp_db):
    """Test amounts mapped to a deactivated leaf add no key to the record."""
    category_service.deactivate_category(seeded_farm.id, "input_fert")
    rollup_service.import_gl_actuals(
        seeded_farm.id, FISCAL_YEAR, rows(("5200", "Nov", 800), ("5100", "Nov", 100))
    )

    record = accounting(temp_db, seeded_farm.id, "Nov")
    assert "input_fert" not in record.data
    assert record.data["inputs"] == 100


def test_chart_of_accounts(seeded_farm, gl_account_service, rollup_service):
    """Test the chart shows mapping and year-to-date totals."""
    rollup_service.import_gl_actuals(
        seeded_farm.id, FISCAL_YEAR, rows(("5100", "Nov", 100), ("5100", "Dec", 50))
    )
    chart = gl_account_service.chart_of_accounts(seeded_farm.id, FISCAL_YEAR)

    entries = {entry["account"].account_number: entry for entry in chart["gl_accounts"]}
    assert entries["5100"]["category_code"] == "input_seed"
    assert entries["5100"]["ytd_total"] == 150
    assert entries["5100"]["month_totals"] == {"Nov": 100, "Dec": 50}
    assert entries["4100"]["category_code"] is None
    assert entries["4100"]["ytd_total"] == 0
    assert len(chart["categories"]) == 18

    without_year = gl_account_service.chart_of_accounts(seeded_farm.id)
    assert "ytd_total" not in without_year["gl_accounts"][0]
