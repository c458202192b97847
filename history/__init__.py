"""
COVID-19 Russia Monitor - History Package

Modules:
    novelty: is_novel(), the new-observation test
    writer: HistoryWriter, which maintains LATEST and the history dataset
"""

from history.novelty import is_novel
from history.writer import DatasetStorage, HistoryWriter, KeyValueStorage

__all__ = [
    "is_novel",
    "HistoryWriter",
    "KeyValueStorage",
    "DatasetStorage",
]
