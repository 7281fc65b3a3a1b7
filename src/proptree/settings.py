"""
Library settings using pydantic-settings.

Values come from constructor arguments first, then environment variables
with the PROPTREE_ prefix:

  PROPTREE_MAX_REENTRANT_EMITS=2
  PROPTREE_STRICT_READS=true
"""

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings


class Settings(_pydantic_settings.BaseSettings):
    """
    Behavioral knobs shared by every node of one config tree.

    The root node reads these once; children reuse the root's instance.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="PROPTREE_",
        extra="ignore",
    )

    max_reentrant_emits: int = _pydantic.Field(default=1, ge=0)
    """How deep a change handler may re-trigger notifications on the same node."""

    strict_reads: bool = False
    """Raise on view reads of unknown keys instead of returning None."""
