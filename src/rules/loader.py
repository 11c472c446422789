import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

logger = logging.getLogger(__name__)


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if the file is missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Rules file {path} must contain a YAML mapping")

    try:
        rules = Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    logger.debug(
        "Loaded rules %s (version %s), metadata policy %s",
        rules.project.slug,
        rules.project.rules_version,
        rules.drafts.merge.metadata_policy,
    )
    return rules
