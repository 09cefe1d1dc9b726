"""Pydantic configuration models for wirerecord."""

import codecs
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class DecodeConfig(BaseModel):
    """
    Settings for interpreting completed responses.

    Example:
        config = DecodeConfig(default_charset="utf-8", target_encoding="ascii")
        record = build_response_from_config(url, 200, 0, raw_headers, body, config)
        text = record.inspectable_body(config.target_encoding, config.placeholder)

    YAML format:
        default_charset: utf-8
        target_encoding: utf-8
        placeholder: "?"
        log_level: DEBUG
    """

    default_charset: Optional[str] = Field(
        None,
        description="Charset assumed when the response declares none (not validated)",
    )
    target_encoding: str = Field(
        "utf-8",
        description="Encoding decoded text must be representable in",
    )
    placeholder: str = Field(
        "?",
        min_length=1,
        max_length=1,
        description="Substitute for unrepresentable characters in lossy decoding",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    @field_validator("target_encoding")
    @classmethod
    def _check_target_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
            "".encode(v)
        except (LookupError, UnicodeError) as err:
            raise ValueError(f"Unknown target encoding: {v}") from err
        return v

    @model_validator(mode="after")
    def _check_placeholder_fits_target(self) -> "DecodeConfig":
        # Lossy output must still encode into the target
        try:
            self.placeholder.encode(self.target_encoding)
        except UnicodeEncodeError as err:
            raise ValueError(
                f"Placeholder {self.placeholder!r} cannot be encoded in {self.target_encoding}"
            ) from err
        return self

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "DecodeConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "DecodeConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
