"""
Planning constants for the load planner.

Bias curve breakpoints, water-fill and search bounds, density reference values.
These are configuration, not computed values; change them here rather than
inline in the services.
"""

from __future__ import annotations

# Water at 60°F, lbs per US gallon (API gravity → lbs/gal conversion)
LBS_PER_GAL_WATER_60F = 8.345404

# Reference temperature for API gravity and catalog densities (°F)
REFERENCE_TEMP_F = 60.0

# CG slider: 0 = full rear, 1 = full front ("plow")
CG_NEUTRAL = 0.5      # slider value with zero bias
CG_FRONT_MAX = 0.9    # bias reaches +1 here
CG_REAR_MAX = 0.0     # bias reaches -1 here
PLOW_BIAS_MAX = 2.5   # bias at slider = 1
CG_CURVE = 1.8        # >1 = less sensitive near neutral
CG_BIAS_MIN = -1.0

# How strongly bias tilts the per-compartment share (bias * position * gain)
TILT_GAIN = 0.85

# Floor for the tilt multiplier so no compartment gets a zero share
MIN_SHAPE = 0.05

# Water-fill allocation
WATER_FILL_MAX_ITER = 20
CAPACITY_EPS = 1e-6

# Weight-constrained binary search
SOLVER_ITERATIONS = 22
WEIGHT_TOLERANCE_LBS = 1e-6

# Headspace derating, fraction of true max
MAX_HEADSPACE_FRACTION = 0.3

# Stored catalog positions use +position = REAR; planning wants +position = FRONT.
STORED_POSITION_POSITIVE_IS_REAR = True

# Floating-point tolerance
EPS = 1e-9
