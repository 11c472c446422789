from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from src.adapters.clock import SystemClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import (
    SQLiteDatabase,
    SQLiteItemRepo,
    SQLiteMetaRepo,
    SQLiteTermRepo,
)
from src.components.actions import DraftActionController
from src.components.content import ContentStores, ItemRef
from src.components.drafts import DraftLink
from src.components.merge import MergeOptions
from src.domain.policy import DraftPolicy
from src.ports.clock import ClockPort
from src.rules.models import Rules
from src.shell.hooks.draft_hooks import DraftHooks

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "migrations"


@dataclass
class ServiceContext:
    stores: ContentStores
    controller: DraftActionController
    hooks: DraftHooks
    policy: DraftPolicy
    merge: MergeOptions
    rules: Rules

    @classmethod
    def create(
        cls,
        db_path: str,
        rules: Rules,
        clock: ClockPort | None = None,
    ) -> ServiceContext:
        """Wire the SQLite adapters for one request or command."""
        db = SQLiteDatabase(db_path)
        stores = ContentStores(
            items=SQLiteItemRepo(db, clock or SystemClock()),
            metadata=SQLiteMetaRepo(db),
            taxonomy=SQLiteTermRepo(db, rules.taxonomies),
            unit_of_work=db,
        )
        return cls.from_stores(stores, rules)

    @classmethod
    def from_stores(cls, stores: ContentStores, rules: Rules) -> ServiceContext:
        merge = MergeOptions.from_rules(rules.drafts.merge)
        policy = DraftPolicy.from_rules(rules)
        return cls(
            stores=stores,
            controller=DraftActionController(stores, policy, rules.drafts.urls, merge),
            hooks=DraftHooks(stores, rules.drafts),
            policy=policy,
            merge=merge,
            rules=rules,
        )

    def link(self, ref: ItemRef | None) -> DraftLink:
        return DraftLink.resolve(ref, self.stores, self.merge)


def run_migrations(db_path: str, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    return SQLiteMigrator(db_path, migrations_dir).run_migrations()


def pending_migrations(db_path: str, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
    return SQLiteMigrator(db_path, migrations_dir).pending()
