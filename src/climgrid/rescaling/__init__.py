"""Grid rescaling.

- monthly_means: Annual cycle (monthly-mean) rescaling of simulations
"""

from climgrid.rescaling.monthly_means import MonthlyMeanRescaler, rescale_monthly_means

__all__ = [
    "MonthlyMeanRescaler",
    "rescale_monthly_means",
]
