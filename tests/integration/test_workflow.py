"""
Integration test for the full FinPlan workflow.

Tests the complete pipeline from settings through tax, RSU vesting,
aggregation, balances, metrics and exports to verify all components work
together correctly.
"""

import json

import pytest

from finplan.config import default_settings, validate_settings
from finplan.investment import roll_balance
from finplan.projection import project, run
from finplan.rsu import compute_vesting, default_grant, refresher_grant, update_grant
from finplan.serialization import export_csv, export_json, load_settings, projections_to_dict
from finplan.tax import compute_tax
from finplan.utils import compute_cagr


@pytest.mark.integration
class TestFullWorkflow:
    """Integration tests for the complete projection pipeline."""

    def test_default_plan(self):
        """
        Project the default plan end to end.

        Smoke test: every list has one entry per year and the years run
        consecutively from the start year.
        """
        settings = default_settings()
        validate_settings(settings)

        projections, metrics = run(settings)

        assert len(projections) == 6
        assert projections.years == list(range(2025, 2031))
        for items in (
            projections.tax_results,
            projections.rsu_vesting,
            projections.yearly_investments,
            projections.yearly_pension,
        ):
            assert [item.year for item in items] == projections.years
        assert metrics.total_wealth > settings.investment.starting_net_worth

    def test_idempotent(self):
        settings = default_settings()
        assert projections_to_dict(project(settings)) == projections_to_dict(project(settings))

    def test_balances_chain(self):
        settings = default_settings()
        projections = project(settings)

        investments = projections.yearly_investments
        assert investments[0].opening_balance == settings.investment.starting_net_worth
        for prev, cur in zip(investments, investments[1:]):
            assert cur.opening_balance == prev.closing_balance
        for inv in investments:
            assert inv.closing_balance == pytest.approx(
                inv.opening_balance + inv.contributions + inv.investment_growth
            )

        pension = projections.yearly_pension
        assert pension[0].opening_balance == settings.investment.starting_pension_balance
        for prev, cur in zip(pension, pension[1:]):
            assert cur.opening_balance == prev.closing_balance

    def test_rsu_tax_is_exact_delta(self):
        """RSU tax equals the extra tax caused by stacking the RSU on salary."""
        projections = project(default_settings())
        for vest in projections.rsu_vesting:
            assert vest.tax_mode == "exact"
            assert vest.tax_paid >= 0
            assert vest.net_value == pytest.approx(vest.gross_value - vest.tax_paid)

        # 2024 grant vests 2024-2027; nothing left after 2027
        by_year = {v.year: v for v in projections.rsu_vesting}
        assert by_year[2027].shares_vested == pytest.approx(250)
        assert by_year[2028].gross_value == 0.0
        assert by_year[2028].tax_paid == 0.0

    def test_pension_on_base_salary_only(self):
        """RSU income does not change the pension deduction."""
        settings = default_settings()
        projections = project(settings)
        first = projections.tax_results[0]
        assert first.pension_contributions == pytest.approx(
            settings.income.base_salary * settings.income.employee_pension_rate
        )

    def test_grant_updates_keep_shares_consistent(self):
        grant = update_grant(default_grant(2024), grant_value=120_000, share_price=120)
        assert grant.grant_shares == pytest.approx(1_000)

        settings = default_settings()
        settings = settings.model_copy(
            update={"rsu_grants": [grant, refresher_grant(2026)]}
        )
        validate_settings(settings)
        for g in settings.rsu_grants:
            assert g.grant_shares == pytest.approx(g.grant_value / g.share_price)

        # refresher adds shares from 2026 on
        vesting = {v.year: v for v in project(settings).rsu_vesting}
        assert vesting[2026].shares_vested == pytest.approx(250 + 40_000 / 150 / 4)

    def test_export_and_reload(self, tmp_path):
        settings = default_settings()
        projections, metrics = run(settings)

        json_path = export_json(settings, projections, tmp_path / "plan.json", metrics=metrics)
        csv_path = export_csv(projections, tmp_path / "plan.csv")

        reloaded = load_settings(json_path)
        assert reloaded == settings
        assert projections_to_dict(project(reloaded)) == json.loads(
            json_path.read_text()
        )["projections"]
        assert len(csv_path.read_text().strip().splitlines()) == 7

    def test_dataframe_view(self):
        frame = project(default_settings()).to_dataframe()
        assert len(frame) == 6
        assert frame.index.name == "year"
        assert "tax_total_tax" in frame.columns
        assert "pension_closing_balance" in frame.columns


@pytest.mark.integration
class TestReferenceScenarios:
    """Hand-computed reference cases."""

    def test_tax_on_50k(self):
        """50k gross, no ruling, 3.38% pension."""
        result = compute_tax(50_000, 0.0338, False, 2025)
        assert result.taxable_income == pytest.approx(48_310)
        assert result.income_tax == pytest.approx(35_472 * 0.0942 + 12_838 * 0.3707)
        assert result.social_contributions == pytest.approx(35_472 * 0.2765)
        assert result.net_income == pytest.approx(35_145.7636, abs=1e-3)

    def test_first_vesting_year(self):
        """1,000 shares granted 2024, price 100 growing 5% from 2025."""
        vesting = compute_vesting(
            grants=[default_grant(2024)],
            start_year=2025,
            num_years=2,
            salary_by_year={2025: 80_000, 2026: 80_000},
            price_growth_rate=0.05,
            current_price=100,
            pension_rate=0.0338,
            has_30_percent_ruling=False,
        )
        assert vesting[0].shares_vested == pytest.approx(250)
        assert vesting[0].vesting_price == pytest.approx(100)
        assert vesting[0].gross_value == pytest.approx(25_000)
        assert vesting[1].vesting_price == pytest.approx(105)

    def test_mid_year_growth(self):
        growth, closing = roll_balance(0, 10_000, 0.10)
        assert growth == pytest.approx(500)
        assert closing == pytest.approx(10_500)

    def test_cagr_from_zero(self):
        assert compute_cagr(0, 10_500, 1) == 0.0
