from pathlib import Path
from typing import List, Optional

import yaml

from ringside.core.logging import get_logger
from ringside.schemas.wrestler import Wrestler

logger = get_logger(__name__)

DEFAULT_ROSTER_PATH = Path(__file__).parent.parent.parent / "lexicon" / "roster.yaml"


def load_roster(path: Optional[str] = None) -> List[Wrestler]:
    """
    Load the wrestler roster from YAML.

    The file holds a top-level `wrestlers` list; entries may use `brand`
    in place of `promotion`. Invalid entries are skipped.
    """
    roster_path = Path(path) if path else DEFAULT_ROSTER_PATH

    try:
        with open(roster_path, 'r', encoding='utf-8') as file:
            data = yaml.safe_load(file) or {}
    except Exception as e:
        logger.error(f"Failed to load roster from {roster_path}: {e}")
        return []

    wrestlers = []
    for entry in data.get("wrestlers", []):
        try:
            wrestlers.append(Wrestler.model_validate(entry))
        except Exception as e:
            logger.warning(f"Skipping invalid roster entry {entry!r}: {e}")

    logger.info(f"Loaded {len(wrestlers)} wrestlers from {roster_path}")
    return wrestlers
