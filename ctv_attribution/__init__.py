"""
CTV Attribution Package.

Derived-metrics core for the CTV attribution dashboard. Takes a bundled,
synthetic catalog of campaign funnels (CTV impressions -> device crossover ->
site visits -> conversions) and derives confidence-adjusted flows, timing
percentiles, data-quality grades and exposed-vs-control incrementality.

Subpackages:
    - core: Configuration and error types
    - models: Pydantic schemas and enums
    - services: Pure derivation services
    - jobs: One-shot export jobs (CSV reports)
"""

__version__ = "1.0.0"
