import sys
import pathlib

# Make the top-level modules importable when running from a checkout
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import pytest

from library_catalog import LibraryCatalog, sample_books


@pytest.fixture
def books():
    return sample_books()


@pytest.fixture
def catalog(books):
    return LibraryCatalog(books)
