"""
Shared fixtures for the TableSift test suite.

Every fixture that involves "today" pins the reference date so results do
not depend on when the suite runs.
"""

from datetime import date

import pytest

from tablesift.core.config import EngineConfig
from tablesift.core.dataset import Dataset
from tablesift.core.observers import AnalysisObserver

REFERENCE_DATE = date(2024, 6, 1)


@pytest.fixture
def config():
    """Default engine configuration with a pinned reference date."""
    return EngineConfig(reference_date=REFERENCE_DATE)


@pytest.fixture
def people_dataset():
    """Small dataset with one problem of each common kind."""
    return Dataset.from_records([
        {"name": "Alice", "age": -5, "email": "alice@example.com", "salary": 52000},
        {"name": "Bob", "age": 30, "email": "bob@example.com", "salary": 61000},
        {"name": "Carol", "age": 45, "email": "carol-at-example", "salary": None},
        {"name": "Dan", "age": 200, "email": "dan@example.com", "salary": 48000},
    ], name="people.csv")


@pytest.fixture
def duplicate_dataset():
    """Three rows where the third repeats the first."""
    return Dataset.from_records([
        {"email": "a@x.com", "city": "Leeds"},
        {"email": "b@x.com", "city": "York"},
        {"email": "a@x.com", "city": "Leeds"},
    ])


class RecordingObserver(AnalysisObserver):
    """Observer that records every event as a tuple."""

    def __init__(self):
        self.events = []

    def on_analysis_start(self, dataset_name, row_count, column_count):
        self.events.append(("start", dataset_name, row_count, column_count))

    def on_pass_start(self, pass_name):
        self.events.append(("pass_start", pass_name))

    def on_pass_complete(self, pass_name, progress):
        self.events.append(("pass_complete", pass_name, progress))

    def on_analysis_complete(self, result):
        self.events.append(("complete", result.quality_score))

    def on_error(self, error, context):
        self.events.append(("error", type(error).__name__, context.get("pass_name")))


@pytest.fixture
def recording_observer():
    """Observer recording engine events in order."""
    return RecordingObserver()
