"""
ROI calculation engine.

Modules
-------
bucketing  : MonthBucket + bucket_by_month(): calendar-month partitioning.
trend      : TrendSignal + compute_trend() + chronological(): recent vs.
             older window comparison.
calculator : compute_report() + analyze() + summarize_sales(), pure
             functions, no I/O.
"""
