"""Shared test fixtures."""

import pytest

from workspace_search.core.importer.json_reader import parse_corpus_data
from workspace_search.models.record import Record

from tests.unit.fakes import CORPUS_DATA


@pytest.fixture
def corpus() -> list[Record]:
    """The sample corpus, in corpus order."""
    return parse_corpus_data(CORPUS_DATA)
