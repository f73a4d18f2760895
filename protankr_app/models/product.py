from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(slots=True)
class Product:
    """
    Product from a terminal's catalog.

    api_60 is the reference API gravity at 60°F and alpha_per_f the thermal
    expansion coefficient. last_api / last_temp_f hold the most recent
    operator-observed hydrometer reading, when one has been recorded.
    """
    product_id: str = ""
    name: str = ""
    api_60: float | None = None
    alpha_per_f: float | None = None
    last_api: float | None = None
    last_temp_f: float | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.product_id

    @property
    def has_observed_reading(self) -> bool:
        """True when both the observed API and its temperature are usable numbers."""
        if self.last_api is None or self.last_temp_f is None:
            return False
        return math.isfinite(self.last_api) and math.isfinite(self.last_temp_f)
