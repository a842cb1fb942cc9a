import os
import tempfile
from datetime import date

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_lori.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["TEMPLATE_APPLY_WORKERS"] = "2"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.domain.enums import PublicationType
from app.domain.search_filter import SearchFilters
import app.repositories.bookmark_template as bookmark_template_repo
import app.repositories.metadata as metadata_repo
import app.repositories.right as right_repo
import app.services.bookmark as bookmark_service
import app.services.right as right_service


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    # Use a temporary file for SQLite database
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    # Create test engine and session with proper SQLite settings
    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
    )

    # Enable WAL mode so template workers can read while the test session is open
    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    # Run Alembic migrations to set up the database schema
    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    try:
        command.upgrade(alembic_cfg, "head")
    except Exception as e:
        print(f"Migration failed: {e}")
        raise

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Dispose the engine to close all connections
        test_engine.dispose()

        # Clean up - remove test database file and directory
        try:
            for suffix in ["", "-wal", "-shm"]:
                path = f"{test_db_path}{suffix}"
                if os.path.exists(path):
                    os.remove(path)
            if os.path.exists(temp_db_dir):
                os.rmdir(temp_db_dir)
        except Exception as e:
            print(f"Cleanup failed: {e}")


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from app.api.deps import get_db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def make_metadata(db):
    """Factory creating metadata records with sensible defaults."""

    def _make(metadata_id: str, **fields):
        values = {
            "handle": f"hdl/{metadata_id}",
            "title": f"Title of {metadata_id}",
            "publication_date": date(2020, 1, 1),
            "publication_type": PublicationType.ARTICLE,
        }
        values.update(fields)
        return metadata_repo.create_metadata(db, metadata_id=metadata_id, **values)

    return _make


@pytest.fixture(scope="function")
def make_right(db):
    """Factory creating plain (non-template) rights."""

    def _make(start_date: date = date(2020, 1, 1), end_date: date | None = None, **fields):
        return right_repo.create_right(db, start_date=start_date, end_date=end_date, **fields)

    return _make


@pytest.fixture(scope="function")
def make_template(db):
    """Factory creating a template, optionally attached to bookmarks."""

    def _make(
        template_name: str,
        start_date: date = date(2020, 1, 1),
        end_date: date | None = None,
        bookmarks=(),
        **fields,
    ):
        template = right_service.create_right(
            db,
            is_template=True,
            template_name=template_name,
            start_date=start_date,
            end_date=end_date,
            **fields,
        )
        if bookmarks:
            bookmark_template_repo.upsert_pairs(
                db, [(b.bookmark_id, template.right_id) for b in bookmarks]
            )
        return template

    return _make


@pytest.fixture(scope="function")
def make_bookmark(db):
    """Factory creating bookmarks from a search term and typed filters."""

    def _make(bookmark_name: str, search_term: str | None = None, filters=()):
        return bookmark_service.create_bookmark(
            db,
            bookmark_name=bookmark_name,
            search_term=search_term,
            filters=SearchFilters.of(filters),
        )

    return _make
