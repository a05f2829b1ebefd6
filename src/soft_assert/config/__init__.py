"""Configuration module for soft-assert-pytest."""

from soft_assert.config.models import SoftAssertConfig
from soft_assert.config.loader import ConfigLoader

__all__ = ["SoftAssertConfig", "ConfigLoader"]
