"""
Runtime configuration read from the environment.

``GOOGLE_CLOUD_PROJECT``       Google Cloud project id.
``DATABASE``                   Firestore database id (default database when unset).
``FIRESTORE_EMULATOR_HOST``    ``host:port`` of a Firestore emulator, if any.
``POSTBOARD_ENABLE_SEEDING``   ``true`` to wipe and reload the sample data at startup.
``POSTBOARD_LOG_LEVEL``        Root log level for :func:`configure_logging`.
"""

import logging
import os
from typing import Mapping, Optional

from .pydantic_compat import BaseModel

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUTHY


class PostboardSettings(BaseModel):
    project_id: str = "postboard-local"
    database: Optional[str] = None
    emulator_host: Optional[str] = None
    enable_seeding: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PostboardSettings":
        env = os.environ if environ is None else environ
        values = {
            "project_id": env.get("GOOGLE_CLOUD_PROJECT") or None,
            "database": env.get("DATABASE") or None,
            "emulator_host": (env.get("FIRESTORE_EMULATOR_HOST") or "").strip() or None,
            "enable_seeding": _env_flag(env.get("POSTBOARD_ENABLE_SEEDING")),
            "log_level": env.get("POSTBOARD_LOG_LEVEL") or None,
        }
        # unset variables fall back to the field defaults
        return cls(**{k: v for k, v in values.items() if v is not None})


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
