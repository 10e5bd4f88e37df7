"""Validation settings — code defaults overridable by ``FIELDCHECK_*`` env vars.

Priority chain (highest to lowest):
  1. Init kwargs  — passed by the host application
  2. Env vars     — ``FIELDCHECK_*`` prefix
  3. Code defaults
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class ValidationSettings(BaseSettings):
    """Defaults applied by :class:`~fieldcheck.validation.Validation`.

    Attributes:
        bail: Bail mode used when ``validate``/``run`` get ``bail=None``.
        message_prefix: Namespace of default messages (``<prefix>.<rule>``).
        verbose: Enable DEBUG logging in :func:`configure_logging`.
        log_json: Render logs as JSON lines.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "FIELDCHECK_",
    }

    bail: bool = False
    message_prefix: str = Field(default="validation", min_length=1)
    verbose: bool = False
    log_json: bool = False
