"""Sales Automation ROI Optimizer: ROI metrics and rule-based optimization recommendations."""

__version__ = "0.1.0"
