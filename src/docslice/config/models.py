"""Pydantic configuration models for docslice."""

from pydantic import BaseModel, ConfigDict, Field

from docslice.config.defaults import (
    DEFAULT_EXAMPLE_PREFIX,
    DEFAULT_INDENT_UNIT,
    DEFAULT_TERMINATOR,
    DEFAULT_TEST_PATTERNS,
)
from docslice.models.enums import DuplicatePolicy


class ScanConfig(BaseModel):
    """Which files are scanned and how examples are recognised."""

    source_glob: str = "*.py"
    test_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_TEST_PATTERNS))
    exclude_patterns: list[str] = Field(default_factory=list)
    example_prefix: str = Field(default=DEFAULT_EXAMPLE_PREFIX, min_length=1)
    on_duplicate: DuplicatePolicy = DuplicatePolicy.OVERWRITE


class SliceConfig(BaseModel):
    """Sentence slicing configuration."""

    terminator: str = Field(default=DEFAULT_TERMINATOR, min_length=1, max_length=1)


class RenderConfig(BaseModel):
    """Example rendering configuration."""

    indent_unit: str = Field(default=DEFAULT_INDENT_UNIT, min_length=1)
    fence_language: str = "python"


class OutputConfig(BaseModel):
    """Console output configuration."""

    verbosity: int = Field(default=1, ge=0, le=3)


class DocsliceConfig(BaseModel):
    """Root configuration model."""

    scan: ScanConfig = Field(default_factory=ScanConfig)
    slices: SliceConfig = Field(default_factory=SliceConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    model_config = ConfigDict(extra="ignore")  # Ignore unknown fields in config file
