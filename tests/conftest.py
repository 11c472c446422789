import os
from pathlib import Path

import pytest

from src.adapters.memory_store import InMemoryContentStore
from src.app_shell.context import ServiceContext, run_migrations
from src.components.content import ContentStores
from src.domain.entities import ActorContext
from src.rules.loader import load_rules
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules() -> Rules:
    """The project's real rules file."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def memory_store(rules: Rules) -> InMemoryContentStore:
    return InMemoryContentStore(taxonomies=rules.taxonomies)


@pytest.fixture
def memory_stores(memory_store: InMemoryContentStore) -> ContentStores:
    return ContentStores.from_store(memory_store)


@pytest.fixture
def memory_ctx(memory_stores: ContentStores, rules: Rules) -> ServiceContext:
    return ServiceContext.from_stores(memory_stores, rules)


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    path = os.path.join(str(tmp_path), "shadow_drafts.db")
    run_migrations(path, PROJECT_ROOT / "migrations")
    return path


@pytest.fixture
def sqlite_ctx(db_path: str, rules: Rules) -> ServiceContext:
    """A full ServiceContext backed by a migrated temporary SQLite DB."""
    return ServiceContext.create(db_path, rules)


@pytest.fixture
def editor() -> ActorContext:
    return ActorContext(actor_id="7", display_name="Editor", capabilities=["edit_posts"])
