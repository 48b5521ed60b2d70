"""Projection of application records into scheduler inputs."""

from .records import (
    Dataset,
    RecordError,
    RecordLoader,
    parse_date,
    parse_positive_int,
    parse_time
)

__all__ = [
    "Dataset",
    "RecordError",
    "RecordLoader",
    "parse_date",
    "parse_positive_int",
    "parse_time",
]
