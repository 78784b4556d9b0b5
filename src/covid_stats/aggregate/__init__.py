"""Aggregation helpers.

Pure functions over sequences of `CovidRecord`s: window statistics for the
stats panel and the newest-known-value lookup used to colour the map. None of
them need a repository, which keeps them trivially testable.
"""
