"""
Product density at temperature from API gravity and thermal expansion.

Standard ASTM D1250-style approximation:
    SG60 = 141.5 / (API60 + 131.5)
    rho60 = SG60 * 8.345404          (lbs/gal)
    rhoT = rho60 / (1 + alpha * (T - 60))

Results may be non-finite for nonsense inputs; callers treat a non-finite or
non-positive density as "no density available".
"""

from __future__ import annotations

import math

from ..config.limits import LBS_PER_GAL_WATER_60F, REFERENCE_TEMP_F
from ..models import Product


def _is_number(value: float | None) -> bool:
    return value is not None and isinstance(value, (int, float)) and math.isfinite(value)


def lbs_per_gallon_at_temp(api60: float, alpha_per_f: float, temp_f: float) -> float:
    """Density in lbs/gal at temp_f. No bounds checking; may return inf/nan."""
    try:
        sg60 = 141.5 / (api60 + 131.5)
        rho60 = sg60 * LBS_PER_GAL_WATER_60F
        return rho60 / (1.0 + alpha_per_f * (temp_f - REFERENCE_TEMP_F))
    except ZeroDivisionError:
        return math.nan


def corrected_api60(observed_api: float, observed_temp_f: float, alpha_per_f: float) -> float | None:
    """
    Back-correct an observed API reading to its 60°F equivalent.

    Returns the api60 for which lbs_per_gallon_at_temp(api60, alpha, observed_temp_f)
    equals the density implied by observed_api, or None when that is not finite.
    """
    try:
        rho_observed = 141.5 / (observed_api + 131.5) * LBS_PER_GAL_WATER_60F
        rho60 = rho_observed * (1.0 + alpha_per_f * (observed_temp_f - REFERENCE_TEMP_F))
        api60 = 141.5 / (rho60 / LBS_PER_GAL_WATER_60F) - 131.5
    except ZeroDivisionError:
        return None
    return api60 if math.isfinite(api60) else None


def effective_api60(product: Product) -> float | None:
    """Observed-corrected api60 when a usable reading exists, else the catalog value."""
    alpha = product.alpha_per_f
    if product.has_observed_reading and _is_number(alpha):
        api60 = corrected_api60(product.last_api, product.last_temp_f, alpha)  # type: ignore[arg-type]
        if api60 is not None:
            return api60
    return product.api_60 if _is_number(product.api_60) else None


def product_lbs_per_gallon(product: Product | None, temp_f: float) -> float | None:
    """Planning density for a product at temp_f; None when it cannot be resolved."""
    if product is None or not _is_number(product.alpha_per_f) or not _is_number(temp_f):
        return None
    api60 = effective_api60(product)
    if api60 is None:
        return None
    rho = lbs_per_gallon_at_temp(api60, product.alpha_per_f, temp_f)  # type: ignore[arg-type]
    if not math.isfinite(rho) or rho <= 0:
        return None
    return rho
