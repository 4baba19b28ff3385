# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# layer-diff/src/layer_diff/ci.py

"""Pass/fail rules for running the efficiency report in CI."""

from dataclasses import dataclass

from .types import EfficiencyReport, RuleResult


@dataclass(frozen=True)
class CIRules:
    """Thresholds checked against an efficiency report. None disables a rule."""
    lowest_efficiency: float | None = 0.9
    highest_wasted_bytes: int | None = None
    highest_user_wasted_percent: float | None = 0.1


def evaluate(report: EfficiencyReport, rules: CIRules) -> list[RuleResult]:
    """Check every rule, in a fixed order."""
    results = []

    if rules.lowest_efficiency is None:
        results.append(RuleResult("lowest_efficiency", "skip", "rule disabled"))
    elif report.score < rules.lowest_efficiency:
        results.append(RuleResult(
            "lowest_efficiency", "fail",
            f"image efficiency is too low "
            f"(efficiency={report.score:.4f} < threshold={rules.lowest_efficiency})"))
    else:
        results.append(RuleResult("lowest_efficiency", "pass"))

    if rules.highest_wasted_bytes is None:
        results.append(RuleResult("highest_wasted_bytes", "skip", "rule disabled"))
    elif report.wasted_bytes > rules.highest_wasted_bytes:
        results.append(RuleResult(
            "highest_wasted_bytes", "fail",
            f"too many bytes wasted "
            f"(wasted-bytes={report.wasted_bytes} > threshold={rules.highest_wasted_bytes})"))
    else:
        results.append(RuleResult("highest_wasted_bytes", "pass"))

    if rules.highest_user_wasted_percent is None:
        results.append(RuleResult("highest_user_wasted_percent", "skip", "rule disabled"))
    elif report.user_wasted_percent > rules.highest_user_wasted_percent:
        results.append(RuleResult(
            "highest_user_wasted_percent", "fail",
            f"too many bytes wasted, relative to the user bytes added "
            f"(%-user-wasted-bytes={report.user_wasted_percent:.4f} "
            f"> threshold={rules.highest_user_wasted_percent})"))
    else:
        results.append(RuleResult("highest_user_wasted_percent", "pass"))

    return results


def passed(results: list[RuleResult]) -> bool:
    return not any(result.status == "fail" for result in results)
