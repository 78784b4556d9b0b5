"""covid_stats package.

Query and aggregation engine over daily per-borough COVID-19 records: case and
death counts alongside Google mobility-change metrics.

Architecture:
- Loader parses a CSV (Dask partitions), a pandas frame or a MongoDB
  collection into immutable Pydantic `CovidRecord`s
- `CovidRepository` holds the record set, the selected date window and the
  current region selection
- Aggregates and the newest-known-value lookup are plain functions over
  record sequences
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
