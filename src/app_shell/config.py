import logging
import os
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Operational requirements from the rules file are not met."""


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.
    """
    ops = rules.ops

    # 1. Data dir must exist and be writable
    if ops.data_dir_required:
        data_dir.mkdir(parents=True, exist_ok=True)
        if not os.access(data_dir, os.W_OK):
            raise ConfigurationError(f"Data directory {data_dir} is not writable")

    # 2. Required env
    missing = [name for name in ops.required_env if name not in os.environ]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    logger.info("Configuration validated (rules %s)", rules.project.rules_version)


class Settings:
    """Deployment settings read from the environment."""

    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("SHADOW_DRAFTS_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "shadow_drafts.db")
        self.rules_path = Path(
            os.environ.get("SHADOW_DRAFTS_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
