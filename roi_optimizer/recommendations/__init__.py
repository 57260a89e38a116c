"""
Recommendation engine: turns an ROIReport plus sales history into ranked,
actionable optimization recommendations.

Modules
-------
rules       : RuleContext + the five rule evaluators + RULES (fixed order);
              pure functions, no I/O.
engine      : generate() runs the battery; recommend() = generate + prioritize.
prioritizer : prioritize(), stable priority / impact ordering.
"""
