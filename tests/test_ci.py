# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_ci.py

"""Unit tests for CI rule evaluation."""

from layer_diff.ci import CIRules, evaluate, passed
from layer_diff.types import EfficiencyReport


def report(wasted: int, image_size: int, user_size: int) -> EfficiencyReport:
    return EfficiencyReport(
        wasted_bytes=wasted,
        image_size=image_size,
        user_size=user_size,
        score=1 - wasted / image_size,
    )


class TestEvaluate:
    """Rules pass, fail or are skipped."""

    def test_default_rules_pass_clean_image(self):
        results = evaluate(report(0, 1000, 100), CIRules())

        assert [r.name for r in results] == [
            "lowest_efficiency", "highest_wasted_bytes", "highest_user_wasted_percent",
        ]
        assert [r.status for r in results] == ["pass", "skip", "pass"]
        assert passed(results)

    def test_low_efficiency_fails(self):
        results = evaluate(report(200, 1000, 1000), CIRules(highest_user_wasted_percent=None))

        assert results[0].status == "fail"
        assert "efficiency=0.8000" in results[0].message
        assert results[2].status == "skip"
        assert not passed(results)

    def test_wasted_bytes_threshold(self):
        rules = CIRules(lowest_efficiency=None, highest_wasted_bytes=50,
                        highest_user_wasted_percent=None)

        assert evaluate(report(50, 1000, 100), rules)[1].status == "pass"
        assert evaluate(report(51, 1000, 100), rules)[1].status == "fail"

    def test_user_wasted_percent(self):
        rules = CIRules(lowest_efficiency=None, highest_user_wasted_percent=0.1)

        assert evaluate(report(10, 1000, 100), rules)[2].status == "pass"
        assert evaluate(report(11, 1000, 100), rules)[2].status == "fail"

    def test_no_user_bytes_never_fails_user_rule(self):
        results = evaluate(report(0, 1000, 0), CIRules())
        assert results[2].status == "pass"

    def test_all_disabled(self):
        rules = CIRules(lowest_efficiency=None, highest_wasted_bytes=None,
                        highest_user_wasted_percent=None)
        results = evaluate(report(900, 1000, 1000), rules)

        assert {r.status for r in results} == {"skip"}
        assert passed(results)
