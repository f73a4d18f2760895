"""
Validation and limit checks for a computed load plan.

Re-checks the safety invariants on the finished rows (capacity, payload) and
turns planning omissions into operator-facing messages: no equipment, nothing
plannable, rear bias, compartments with a product that could not be planned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from protankr_app.config.limits import CAPACITY_EPS, EPS, WEIGHT_TOLERANCE_LBS
from protankr_app.models import ExclusionReason, PlanResult


class ValidationSeverity(Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: ValidationSeverity
    message: str
    value: float | None = None
    limit: float | None = None


@dataclass(slots=True)
class ValidationResult:
    valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == ValidationSeverity.WARNING for i in self.issues)


# Exclusions worth telling the operator about: a product was chosen but the
# compartment still could not be planned.
_REPORTED_EXCLUSIONS = {
    ExclusionReason.UNKNOWN_PRODUCT: "product {product} is not in the terminal catalog",
    ExclusionReason.NO_DENSITY: "no usable density for product {product}",
    ExclusionReason.NO_CAPACITY: "no capacity left after headspace",
    ExclusionReason.INVALID_NUMBER: "invalid compartment data",
}


def safe_divide(a: float, b: float, default: float = 0.0) -> float:
    """Avoid zero divisions."""
    if abs(b) < EPS:
        return default
    return a / b


def validate_plan(result: PlanResult) -> ValidationResult:
    """Run all checks on a plan result."""
    issues: List[ValidationIssue] = []

    # 1. No payload (usually: no equipment selected)
    if result.payload_limit_lbs <= EPS:
        issues.append(
            ValidationIssue(
                code="NO_EQUIPMENT",
                severity=ValidationSeverity.WARNING,
                message="Payload limit is 0 lbs. Select equipment with gross and tare weights first.",
                value=result.payload_limit_lbs,
                limit=None,
            )
        )

    # 2. Nothing plannable
    if not result.rows:
        issues.append(
            ValidationIssue(
                code="NO_ACTIVE",
                severity=ValidationSeverity.WARNING,
                message="No compartments to plan. Select a terminal and a product for at least one compartment.",
            )
        )

    # 3. Rear bias
    if result.unstable:
        issues.append(
            ValidationIssue(
                code="UNSTABLE_BIAS",
                severity=ValidationSeverity.WARNING,
                message=f"Unstable load: CG bias {result.bias:+.2f} is rear of neutral.",
                value=result.bias,
                limit=0.0,
            )
        )

    # 4. Capacity per row
    for row in result.rows:
        limit = row.effective_max_gallons or row.max_gallons
        if row.planned_gallons < -CAPACITY_EPS or row.planned_gallons > limit + CAPACITY_EPS:
            issues.append(
                ValidationIssue(
                    code="OVER_CAPACITY",
                    severity=ValidationSeverity.ERROR,
                    message=(
                        f"Compartment {row.comp_number}: {row.planned_gallons:.1f} gal "
                        f"outside 0..{limit:.0f} gal."
                    ),
                    value=row.planned_gallons,
                    limit=limit,
                )
            )

    # 5. Payload
    total_lbs = result.total_lbs
    if total_lbs > result.payload_limit_lbs + WEIGHT_TOLERANCE_LBS:
        issues.append(
            ValidationIssue(
                code="OVERWEIGHT",
                severity=ValidationSeverity.ERROR,
                message=(
                    f"Planned weight {total_lbs:.0f} lbs exceeds payload limit "
                    f"{result.payload_limit_lbs:.0f} lbs."
                ),
                value=total_lbs,
                limit=result.payload_limit_lbs,
            )
        )

    # 6. Compartments with a product that could not be planned
    for exc in result.excluded:
        template = _REPORTED_EXCLUSIONS.get(exc.reason)
        if template is None or not exc.product_id:
            continue
        issues.append(
            ValidationIssue(
                code="EXCLUDED",
                severity=ValidationSeverity.WARNING,
                message=f"Compartment {exc.comp_number} left out: " + template.format(product=exc.product_id),
            )
        )

    valid = not any(i.severity == ValidationSeverity.ERROR for i in issues)
    return ValidationResult(valid=valid, issues=issues)


def fill_pct(planned_gallons: float, max_gallons: float) -> float:
    """Fill percentage of a compartment, 0 when it has no capacity."""
    return safe_divide(planned_gallons, max_gallons) * 100.0
