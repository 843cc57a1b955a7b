"""Per-module schema migrations, with the current version of each module kept in ``db_version``."""

from __future__ import annotations

import datetime
import logging
from typing import Callable, ClassVar, Optional

from .database import Database
from .errors import MigrationError
from .query import Q
from .schema import Column, ColumnType, Index, IndexType, Table

logger = logging.getLogger(__name__)

VERSION_TABLE = "db_version"


def version_table() -> Table:
    """Definition of the table recording the schema version of every module."""
    return Table(
        name=VERSION_TABLE,
        columns={
            "id": Column(name="id", type=ColumnType.INT, nullable=False, serial=True),
            "module": Column(name="module", type=ColumnType.VARCHAR, max_length=128, nullable=False),
            "version": Column(name="version", type=ColumnType.INT, nullable=False, default=0),
            "date": Column(name="date", type=ColumnType.DATETIME),
        },
        indexes=[
            Index(type=IndexType.PRIMARY, columns=["id"]),
            Index(type=IndexType.UNIQUE, columns=["module"]),
        ],
    )


class Migration:
    """Base class for the migrations of one module.

    Subclasses set ``MODULE`` and ``MAX_VERSION`` and define one method per step:
    ``upgrade_to_v<N>(db)`` brings the schema from version N-1 to N, and
    ``downgrade_to_v<N>(db)`` brings it from N+1 back to N::

        class BlogMigration(Migration):
            MODULE = "blog"
            MAX_VERSION = 1

            def upgrade_to_v1(self, db):
                db.create_table(posts_table())

            def downgrade_to_v0(self, db):
                db.drop_table("posts")

    Each step runs in its own transaction, together with the update of the
    recorded version. A failing step is rolled back and its exception re-raised,
    leaving the module at the last version that completed.
    """

    MODULE: ClassVar[str] = ""
    MAX_VERSION: ClassVar[int] = 0

    def __init__(self, database: Database):
        if not self.MODULE:
            raise MigrationError(f"{type(self).__name__} does not name its module")
        self.database = database
        if not database.table_exists(VERSION_TABLE):
            logger.info("Creating table %s", VERSION_TABLE)
            database.create_table(version_table())

    @property
    def current_version(self) -> int:
        row = self._version_row()
        return row["version"] if row is not None else 0

    def upgrade_to(self, version: Optional[int] = None) -> int:
        """Run every upgrade step up to ``version`` (default ``MAX_VERSION``); return the new version."""
        if version is None:
            version = self.MAX_VERSION
        self._check_version(version, minimum=1)
        current = self.current_version
        if version < current:
            raise MigrationError(f"Module {self.MODULE} is at version {current}, cannot upgrade to {version}")
        steps = [(target, self._step("upgrade", target)) for target in range(current + 1, version + 1)]
        return self._run(steps, current)

    def downgrade_to(self, version: int) -> int:
        """Run every downgrade step down to ``version``; return the new version."""
        self._check_version(version, minimum=0)
        current = self.current_version
        if version > current:
            raise MigrationError(f"Module {self.MODULE} is at version {current}, cannot downgrade to {version}")
        steps = [(target, self._step("downgrade", target)) for target in range(current - 1, version - 1, -1)]
        return self._run(steps, current)

    def _check_version(self, version: int, minimum: int) -> None:
        if not isinstance(version, int) or isinstance(version, bool):
            raise MigrationError(f"Version is not an integer: {version!r}")
        if version < minimum or version > self.MAX_VERSION:
            raise MigrationError(
                f"Invalid version {version} for module {self.MODULE} (must be between {minimum} and {self.MAX_VERSION})"
            )

    def _step(self, direction: str, version: int) -> Callable[[Database], None]:
        step = getattr(self, f"{direction}_to_v{version}", None)
        if step is None:
            raise MigrationError(f"{direction.capitalize()} of module {self.MODULE} to version {version} is not implemented")
        return step

    def _run(self, steps: list[tuple[int, Callable[[Database], None]]], version: int) -> int:
        for target, step in steps:
            logger.info("Migrating module %s from version %d to %d", self.MODULE, version, target)
            try:
                with self.database.transaction():
                    step(self.database)
                    self._store_version(target)
            except Exception:
                logger.error("Migration of module %s to version %d failed", self.MODULE, target)
                raise
            version = target
        return version

    def _version_row(self) -> Optional[dict]:
        return self.database.fetch_one(
            Q.select("version", Q.from_(VERSION_TABLE), Q.where(Q.equals("module", self.MODULE)))
        )

    def _store_version(self, version: int) -> None:
        values = {
            "version": version,
            "date": datetime.datetime.now().isoformat(sep=" ", timespec="seconds"),
        }
        if self._version_row() is None:
            self.database.execute(Q.insert(VERSION_TABLE, {"module": self.MODULE, **values})).close()
        else:
            self.database.execute(
                Q.update(VERSION_TABLE, values, Q.where(Q.equals("module", self.MODULE)))
            ).close()


__all__ = ["Migration", "VERSION_TABLE", "version_table"]
