import pytest

from src.backoff.budget import exponential_retries, linear_retries
from src.backoff.constructors import exponential
from src.backoff.engine import all_waits
from src.backoff.errors import InvalidPolicy
from src.models.policy import INFINITY


class TestLinearRetries:
    """Tests for linear_retries()."""

    @pytest.mark.unit
    def test_floor_of_budget_over_timeout(self):
        assert linear_retries(1000, 300) == 3

    @pytest.mark.unit
    @pytest.mark.parametrize("budget,timeout", [(1000, 300), (999, 1000), (1000, 1000), (12345, 7), (0, 50)])
    def test_retries_fit_budget_exactly(self, budget, timeout):
        retries = linear_retries(budget, timeout)
        assert retries * timeout <= budget < (retries + 1) * timeout

    @pytest.mark.unit
    def test_zero_timeout_cannot_be_derived(self):
        with pytest.raises(InvalidPolicy, match="timeout"):
            linear_retries(1000, 0)

    @pytest.mark.unit
    @pytest.mark.parametrize("budget", [-1, 10.0, "1000", None])
    def test_rejects_bad_budget(self, budget):
        with pytest.raises(InvalidPolicy, match="max_total_timeout"):
            linear_retries(budget, 100)


class TestExponentialRetries:
    """Tests for exponential_retries()."""

    @pytest.mark.unit
    def test_factor_one_behaves_linearly(self):
        assert exponential_retries(1000, 1, 300) == 3

    @pytest.mark.unit
    def test_cap_at_or_below_first_wait_behaves_linearly(self):
        # Every wait is min(300, 200) = 200
        assert exponential_retries(1000, 2, 300, 200) == 5

    @pytest.mark.unit
    def test_uncapped_growth(self):
        # 100 + 200 + 400 = 700 <= 1000 < 1500
        assert exponential_retries(1000, 2, 100) == 3

    @pytest.mark.unit
    def test_budget_runs_out_before_cap(self):
        # 100 + 200 + 400 = 700, the budget is gone long before waits hit 1000
        assert exponential_retries(1000, 2, 100, 1000) == 3

    @pytest.mark.unit
    def test_budget_spills_into_capped_phase(self):
        # 100 + 200 + 400 + 500 = 1200 <= 1500 < 1700
        assert exponential_retries(1500, 2, 100, 500) == 4

    @pytest.mark.unit
    def test_long_capped_phase(self):
        # 100 + 200 + 400 + 500 * 7 = 4200 <= 4500 < 4700
        assert exponential_retries(4500, 2, 100, 500) == 10

    @pytest.mark.unit
    def test_zero_budget_gives_zero_retries(self):
        assert exponential_retries(0, 2, 100, 500) == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("budget", [1500, 4500, 10_000, 25_000])
    def test_derived_schedule_fits_budget(self, budget):
        policy = exponential(exponential_retries(budget, 2, 100, 500), 2, 100, 500)
        waits = all_waits(policy)
        assert sum(waits) <= budget
        assert sum(waits) + 500 > budget

    @pytest.mark.unit
    def test_zero_effective_wait_cannot_be_derived(self):
        with pytest.raises(InvalidPolicy, match="timeout"):
            exponential_retries(1000, 2, 100, 0)

    @pytest.mark.unit
    def test_zero_first_wait_cannot_be_derived(self):
        with pytest.raises(InvalidPolicy, match="timeout"):
            exponential_retries(1000, 2, 0, 500)

    @pytest.mark.unit
    def test_shrinking_factor_cannot_be_derived(self):
        with pytest.raises(InvalidPolicy, match="factor"):
            exponential_retries(1000, 0.5, 100, INFINITY)
