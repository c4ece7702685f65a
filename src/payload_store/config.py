"""
Processor configuration.

Resolution order: defaults, then ``~/.payload-store/config.json``, then the
``PAYLOAD_STORE_RESTORE_POLICY`` environment variable.
"""

import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

CONFIG_FILE = Path.home() / ".payload-store" / "config.json"
RESTORE_POLICY_ENV = "PAYLOAD_STORE_RESTORE_POLICY"


class RestorePolicy(str, Enum):
    """What restore does with a stored value that fails to decode."""
    DROP = "drop"          # warn, discard the stored field, leave payload unset
    PRESERVE = "preserve"  # warn, keep the stored field for manual recovery
    RAISE = "raise"        # fail the whole restore


class ProcessorConfig(BaseModel):
    restore_policy: RestorePolicy = RestorePolicy.DROP


def _load_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[Path] = None) -> ProcessorConfig:
    values = _load_file(path or CONFIG_FILE)
    policy = os.environ.get(RESTORE_POLICY_ENV)
    if policy:
        values["restore_policy"] = policy.strip().lower()
    return ProcessorConfig.model_validate(values)
