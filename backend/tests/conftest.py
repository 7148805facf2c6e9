import sys
from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from db import init_db, make_engine  # noqa: E402


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh SQLite file per test."""
    engine = make_engine(f"sqlite:///{tmp_path / 'pos.sqlite'}")
    init_db(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()
