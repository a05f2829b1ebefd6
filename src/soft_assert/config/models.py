"""Pydantic models for soft assertion configuration."""

from pydantic import BaseModel, Field, field_validator


class SoftAssertConfig(BaseModel):
    """Root configuration model for the soft assertion plugin."""

    log_level: str = Field("WARNING", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_failures: bool = Field(True, description="Whether to log each failure to the console")
    max_message_length: int = Field(
        2000, description="Longest failure message kept in the test report"
    )
    show_location: bool = Field(True, description="Prefix failures with file:line")
    use_colors: bool = Field(True, description="Colored console output on a TTY")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("max_message_length")
    @classmethod
    def validate_max_message_length(cls, v: int) -> int:
        """Validate message length is positive."""
        if v <= 0:
            raise ValueError("max_message_length must be positive")
        return v
