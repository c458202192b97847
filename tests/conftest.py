"""
COVID-19 Russia Monitor - Test Configuration

Pytest fixtures shared by unit and integration tests: test environment,
in-memory SQLite stores, in-memory fakes for the store interfaces and
sample ministry page content.
"""

import os
from datetime import datetime, timezone
from typing import Any, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as an integration test",
    )


# =============================================================================
# Environment Configuration
# =============================================================================

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Configure environment for testing."""
    os.environ.setdefault("ENVIRONMENT", "test")
    os.environ.setdefault("DATABASE_URL", "sqlite://")
    os.environ.setdefault("LOG_LEVEL", "WARNING")
    os.environ.setdefault("LOG_FILE", "")

    yield


@pytest.fixture
def settings():
    """Fresh settings built from the test environment."""
    from config.settings import Settings, clear_settings_cache

    clear_settings_cache()
    yield Settings(database_url="sqlite://", log_file=None)
    clear_settings_cache()


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    """Create in-memory SQLite engine for testing."""
    from database.models import Base

    engine = create_engine("sqlite://", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session(engine):
    """Create a new database session for each test."""
    Session = sessionmaker(bind=engine, expire_on_commit=False)
    session = Session()
    yield session
    session.rollback()
    session.close()


# =============================================================================
# In-Memory Store Fakes
# =============================================================================

class InMemoryKeyValueStore:
    """Key-value store fake that records every write."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self.values: dict[str, Any] = dict(initial or {})
        self.writes: list[tuple[str, Any]] = []

    def get_value(self, key: str) -> Optional[Any]:
        return self.values.get(key)

    def set_value(self, key: str, value: Any) -> None:
        self.values[key] = value
        self.writes.append((key, value))


class InMemoryDataset:
    """Append-only dataset fake."""

    def __init__(self):
        self.items: list[dict[str, Any]] = []

    def push_data(self, record: dict[str, Any]) -> None:
        self.items.append(record)


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def dataset():
    return InMemoryDataset()


# =============================================================================
# Sample Data
# =============================================================================

SAMPLE_ARTICLE_TEXT = (
    "Информация на 01.02.2021 в 10:30. "
    "В России проведено 1 234 567 тестов в лабораториях страны. "
    "Всего зарегистрировано 3 548 случаев заболевания в 85 регионах. "
    "По выздоровлению выписаны 235 человек. "
    "30 человек умерли."
)


def make_page_html(article_text: str, title: str = "COVID-19 | Минздрав России") -> str:
    """Wrap article text in the page structure the scraper expects."""
    return f"""
    <html>
        <head><title>{title}</title></head>
        <body>
            <header><p><span>Меню</span></p></header>
            <article>
                <div class="row">
                    <div class="col-md-12">
                        <p><span>{article_text}</span></p>
                        <p><span>Второй абзац без цифр.</span></p>
                    </div>
                </div>
            </article>
        </body>
    </html>
    """


@pytest.fixture
def sample_article_text():
    return SAMPLE_ARTICLE_TEXT


@pytest.fixture
def sample_page_html():
    return make_page_html(SAMPLE_ARTICLE_TEXT)


@pytest.fixture
def fetched_at():
    return datetime(2021, 2, 1, 12, 0, 5, tzinfo=timezone.utc)


@pytest.fixture
def record_factory(fetched_at):
    """Factory for CandidateRecord test data."""
    def _create_record(**kwargs):
        from extraction.models import CandidateRecord

        defaults = {
            "source_url": "https://www.rosminzdrav.ru/ministry/covid19",
            "fetched_at": fetched_at,
            "source_title": "COVID-19 | Минздрав России",
            "read_me": "https://apify.com/krakorj/covid-russia",
            "source_timestamp": datetime(2021, 2, 1, 10, 30, tzinfo=timezone.utc),
            "tested_cases_total": "1234567",
            "infected_total": "3548",
            "recovered_total": "235",
            "deaths_total": "30",
        }
        defaults.update(kwargs)
        return CandidateRecord(**defaults)
    return _create_record


@pytest.fixture
def page_html_factory():
    return make_page_html
