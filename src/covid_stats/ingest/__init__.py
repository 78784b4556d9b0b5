"""Loaders that turn raw tabular sources into `CovidRecord` sequences.

CSV files are read as Dask partitions and normalised partition-wise; pandas
frames and MongoDB collections share the same normalisation and validation.
"""
