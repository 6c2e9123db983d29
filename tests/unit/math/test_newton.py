"""Tests for the shared converge-or-cap iteration."""

import pytest
from structlog.testing import capture_logs

from tokenswap.math.newton import converge
from tokenswap.safe_int import U128, DivisionByZero


class TestConverge:
    """Tests for converge()."""

    def test_stops_at_fixed_point(self):
        """Iteration ends as soon as the estimate repeats."""
        calls = []

        def step(x: int) -> int:
            calls.append(x)
            return min(x + 1, 5)

        assert converge(0, step, max_iterations=100) == 5
        # 0..4 move the estimate, 5 -> 5 confirms it
        assert calls == [0, 1, 2, 3, 4, 5]

    def test_cap_returns_last_estimate(self):
        """Hitting the cap is not an error; the last estimate is returned."""
        assert converge(0, lambda x: x + 1, max_iterations=3) == 3

    def test_cap_is_logged(self):
        """Hitting the cap logs newton_iteration_cap_reached at debug."""
        with capture_logs() as logs:
            converge(0, lambda x: x + 1, max_iterations=3)
        assert logs == [
            {"event": "newton_iteration_cap_reached", "log_level": "debug", "max_iterations": 3}
        ]

    def test_no_log_when_converged(self):
        """Converging inside the cap logs nothing."""
        with capture_logs() as logs:
            converge(7, lambda x: x, max_iterations=3)
        assert logs == []

    def test_custom_convergence_test(self):
        """A custom test can stop on a tolerance instead of equality."""
        result = converge(
            1000,
            lambda x: x // 2,
            max_iterations=100,
            converged=lambda previous, current: previous - current <= 10,
        )
        # 1000, 500, 250, 125, 62, 31, 15, 7: the last step moves by 8
        assert result == 7

    def test_zero_cap_returns_initial(self):
        """With no iterations allowed the initial estimate comes back."""
        assert converge(42, lambda x: x + 1, max_iterations=0) == 42

    def test_step_errors_propagate(self):
        """Arithmetic errors raised by the step reach the caller."""
        with pytest.raises(DivisionByZero):
            converge(U128(1), lambda x: x // 0, max_iterations=5)

    def test_works_with_safe_ints(self):
        """Estimates may be SafeInts; equality ends the iteration."""
        result = converge(U128(100), lambda x: U128(max(int(x) // 2, 3)), max_iterations=50)
        assert result == U128(3)
