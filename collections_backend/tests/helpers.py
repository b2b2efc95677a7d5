import tempfile
from pathlib import Path

from collections_backend.config import Settings


def sqlite_url(directory: str) -> str:
    path = Path(directory) / "collections.db"
    return f"sqlite+pysqlite:///{path}?check_same_thread=false"


def sqlite_settings(directory: str, **overrides) -> Settings:
    values = {
        "database_url": sqlite_url(directory),
        "db_create_tables": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TempDirMixin:
    def make_tempdir(self) -> str:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        return tmp.name
