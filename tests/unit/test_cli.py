"""Tests for the setaside CLI commands."""

import json

import pytest
from click.testing import CliRunner

from setaside.cli.__main__ import cli


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Isolated config and data directories."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"
    config_dir.mkdir()
    data_dir.mkdir()

    monkeypatch.setenv("SETASIDE_CONFIG_PATH", str(config_dir))
    (config_dir / "settings.json").write_text(json.dumps({"data_dir": str(data_dir)}))

    return {"config_dir": config_dir, "data_dir": data_dir}


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, args):
    result = runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    return result


def add_april_income(runner):
    invoke(runner, ["income", "add", "1000", "--client", "Acme", "--date", "2024-04-03"])
    invoke(runner, ["income", "add", "500", "--client", "Globex", "--date", "2024-04-20"])


def income_ids(runner):
    return [r["id"] for r in json.loads(invoke(runner, ["income", "list", "--format", "json"]).output)]


def tax_records(runner):
    return json.loads(invoke(runner, ["taxes", "list", "--format", "json"]).output)["tax_records"]


class TestEstimate:

    def test_profile_defaults(self, isolated_env, runner):
        result = invoke(runner, ["estimate", "5000", "--format", "json"])
        data = json.loads(result.output)
        assert data["total_set_aside"] == pytest.approx(1400)

    def test_rates_in_percent(self, isolated_env, runner):
        result = invoke(runner, ["estimate", "5000", "--tax-rate", "20", "--social-rate", "5",
                                 "--extra-rate", "0", "--format", "json"])
        data = json.loads(result.output)
        assert data["estimated_tax"] == pytest.approx(1250)
        assert data["reserve_extra"] == 0

    def test_text_output(self, isolated_env, runner):
        result = invoke(runner, ["estimate", "1000", "--deductions", "200"])
        assert "$800.00" in result.output
        assert "$224.00" in result.output


class TestIncome:

    def test_add_regenerates_tax_records(self, isolated_env, runner):
        add_april_income(runner)
        records = tax_records(runner)
        assert len(records) == 1
        assert records[0]["period_label"] == "April 2024"
        assert records[0]["taxable_income"] == pytest.approx(1500)
        assert records[0]["amount_due"] == pytest.approx(420)

    def test_add_shows_set_aside(self, isolated_env, runner):
        result = invoke(runner, ["income", "add", "1000", "--client", "Acme", "--date", "2024-04-03"])
        assert "Set aside: $280.00" in result.output

    def test_unpaid_not_taxed(self, isolated_env, runner):
        invoke(runner, ["income", "add", "1000", "--client", "Acme", "--date", "2024-04-03", "--unpaid"])
        assert tax_records(runner) == []

    def test_invalid_date(self, isolated_env, runner):
        result = runner.invoke(cli, ["income", "add", "10", "--client", "A", "--date", "04/03/2024"])
        assert result.exit_code != 0
        assert "YYYY-MM-DD" in result.output

    def test_list_count(self, isolated_env, runner):
        add_april_income(runner)
        assert invoke(runner, ["income", "list", "--count"]).output.strip() == "2"
        assert invoke(runner, ["income", "list", "--status", "unpaid", "--count"]).output.strip() == "0"

    def test_list_text(self, isolated_env, runner):
        add_april_income(runner)
        result = invoke(runner, ["income", "list"])
        assert "Acme" in result.output
        assert "Total: 2 record(s), $1,500.00" in result.output

    def test_list_empty(self, isolated_env, runner):
        assert "No income found" in invoke(runner, ["income", "list"]).output

    def test_toggle_by_prefix(self, isolated_env, runner):
        add_april_income(runner)
        record_id = income_ids(runner)[0]
        result = invoke(runner, ["income", "toggle", record_id[:8]])
        assert "is now unpaid" in result.output
        assert tax_records(runner)[0]["taxable_income"] == pytest.approx(1000)

    def test_remove(self, isolated_env, runner):
        add_april_income(runner)
        ids = income_ids(runner)
        invoke(runner, ["income", "remove", "--force", *ids])
        assert income_ids(runner) == []
        assert tax_records(runner) == []

    def test_remove_unknown(self, isolated_env, runner):
        result = runner.invoke(cli, ["income", "remove", "--force", "nope"])
        assert result.exit_code == 1
        assert "No record with id nope" in result.output


class TestTaxes:

    def test_pay_and_toggle(self, isolated_env, runner):
        add_april_income(runner)
        record_id = tax_records(runner)[0]["id"]

        invoke(runner, ["taxes", "pay", record_id])
        record = tax_records(runner)[0]
        assert record["is_paid"] is True
        assert record["paid_at"] is not None

        invoke(runner, ["taxes", "toggle", record_id[:8]])
        record = tax_records(runner)[0]
        assert record["is_paid"] is False
        assert record["paid_at"] is None

    def test_payment_survives_new_income(self, isolated_env, runner):
        add_april_income(runner)
        record_id = tax_records(runner)[0]["id"]
        invoke(runner, ["taxes", "pay", record_id])
        invoke(runner, ["income", "add", "100", "--client", "Initech", "--date", "2024-04-28"])

        record = tax_records(runner)[0]
        assert record["id"] == record_id
        assert record["is_paid"] is True
        assert record["taxable_income"] == pytest.approx(1600)

    def test_list_totals(self, isolated_env, runner):
        add_april_income(runner)
        result = invoke(runner, ["taxes", "list"])
        assert "Next payment: $420.00" in result.output
        assert "Outstanding: $420.00" in result.output

    def test_remove_then_regenerate(self, isolated_env, runner):
        add_april_income(runner)
        record_id = tax_records(runner)[0]["id"]
        invoke(runner, ["taxes", "remove", "--force", record_id])
        result = invoke(runner, ["taxes", "regenerate"])
        assert "Regenerated 1 tax record(s)" in result.output

    def test_pay_unknown(self, isolated_env, runner):
        result = runner.invoke(cli, ["taxes", "pay", "nope"])
        assert result.exit_code == 1


class TestProfile:

    def test_init_and_show(self, isolated_env, runner):
        invoke(runner, ["profile", "init"])
        assert (isolated_env["config_dir"] / "profile.yaml").exists()
        result = invoke(runner, ["profile", "show"])
        assert "Tax rate: 25.0%" in result.output

    def test_init_refuses_overwrite(self, isolated_env, runner):
        invoke(runner, ["profile", "init"])
        result = runner.invoke(cli, ["profile", "init"])
        assert result.exit_code == 1
        assert "--force" in result.output

    def test_set_rate_regenerates(self, isolated_env, runner):
        add_april_income(runner)
        invoke(runner, ["profile", "set", "default_tax_rate", "0.30"])
        assert tax_records(runner)[0]["amount_due"] == pytest.approx(1500 * 0.33)

    def test_set_invalid(self, isolated_env, runner):
        result = runner.invoke(cli, ["profile", "set", "default_tax_rate", "7"])
        assert result.exit_code == 1
        assert "validation errors" in result.output

    def test_set_null_reminder_day(self, isolated_env, runner):
        result = runner.invoke(cli, ["profile", "set", "reminder.day", "null"])
        assert result.exit_code == 1
        assert "reminder.day" in result.output

    def test_commands_report_bad_profile(self, isolated_env, runner):
        (isolated_env["config_dir"] / "profile.yaml").write_text("reminder:\n  day: [1, 2]\n")
        result = runner.invoke(cli, ["income", "list"])
        assert result.exit_code == 1
        assert "validation errors" in result.output

    def test_get(self, isolated_env, runner):
        assert invoke(runner, ["profile", "get", "filing_status"]).output.strip() == "single"


class TestOther:

    def test_schedule_next(self, isolated_env, runner):
        result = invoke(runner, ["schedule", "--from", "2024-05-01"])
        assert "Q2 2024 due 2024-06-15" in result.output
        assert "Days remaining: 45" in result.output

    def test_schedule_year(self, isolated_env, runner):
        result = invoke(runner, ["schedule", "--year", "2024", "--from", "2024-05-01"])
        assert "Q1   2024-04-15   passed" in result.output
        assert "2025-01-15" in result.output

    def test_summary_json(self, isolated_env, runner):
        invoke(runner, ["income", "add", "25000", "--client", "Acme", "--date", "2023-02-01"])
        result = invoke(runner, ["summary", "2023", "--as-of", "2023-07-01", "--prior-tax", "8000",
                                 "--prior-agi", "60000", "--format", "json"])
        data = json.loads(result.output)
        assert data["gross_income"] == 25000
        assert data["quarters_elapsed"] == 2
        assert data["safe_harbor"]["minimum_payment"] <= 8000
        assert len(data["annualized_installments"]) == 4

    def test_summary_text(self, isolated_env, runner):
        invoke(runner, ["income", "add", "25000", "--client", "Acme", "--date", "2023-02-01"])
        result = invoke(runner, ["summary", "2023", "--as-of", "2023-07-01"])
        assert "Tax year 2023" in result.output
        assert "Gross income:" in result.output

    def test_reminder_set_clamps(self, isolated_env, runner):
        result = invoke(runner, ["reminder", "set", "--day", "31", "--hour", "7"])
        assert "day 28 at 07:00" in result.output

    def test_reminder_set_needs_option(self, isolated_env, runner):
        result = runner.invoke(cli, ["reminder", "set"])
        assert result.exit_code == 2

    def test_reset(self, isolated_env, runner):
        add_april_income(runner)
        invoke(runner, ["reset", "--force"])
        assert not (isolated_env["data_dir"] / "store.json").exists()
        assert income_ids(runner) == []

    def test_corrupt_store(self, isolated_env, runner):
        (isolated_env["data_dir"] / "store.json").write_text("{oops")
        result = runner.invoke(cli, ["income", "list"])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_settings_show(self, isolated_env, runner):
        result = invoke(runner, ["settings", "show"])
        assert str(isolated_env["data_dir"]) in result.output

    def test_version(self, runner):
        assert "setaside" in invoke(runner, ["--version"]).output
