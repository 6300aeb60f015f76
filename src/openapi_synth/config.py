"""Settings for schema synthesis and document output."""

import os

from pydantic import BaseModel, Field

DEFAULT_OPENAPI_VERSION = "3.0.3"


class SynthesisSettings(BaseModel):
    """Knobs shared by the synthesizer and the document builder."""

    max_depth: int = Field(default=32, ge=1)  # nesting limit before a node is left empty
    openapi_version: str = DEFAULT_OPENAPI_VERSION
    datetime_format: str = "date-time"
    default_example_name: str = "Example"

    @classmethod
    def from_env(cls) -> "SynthesisSettings":
        """Load settings, letting environment variables override the defaults."""
        values = {}
        if depth := os.getenv("OPENAPI_SYNTH_MAX_DEPTH"):
            values["max_depth"] = int(depth)
        if fmt := os.getenv("OPENAPI_SYNTH_DATETIME_FORMAT"):
            values["datetime_format"] = fmt
        return cls(**values)
