"""Resolve soft assertion settings from YAML files, ini keys and options."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import pytest
import yaml

from soft_assert.config.models import SoftAssertConfig

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Build a SoftAssertConfig for a pytest session.

    Precedence, lowest first:
    1. Model defaults
    2. YAML file (--soft-assert-config, soft_assert_config_file, or a file
       named in CONFIG_NAMES found from the root directory upward)
    3. soft_assert_max_message_length ini key
    4. --soft-assert-log-level option
    """

    CONFIG_NAMES: Tuple[str, ...] = (
        "soft_assert.yaml",
        "soft_assert.yml",
        ".soft_assert.yaml",
        ".soft_assert.yml",
    )

    @classmethod
    def from_pytest_config(cls, config: pytest.Config) -> SoftAssertConfig:
        """
        Resolve the session configuration from pytest's options and ini file.

        Raises:
            FileNotFoundError: If --soft-assert-config names a missing file.
        """
        root_dir = Path(config.rootpath)
        option_path = config.getoption("soft_assert_config")

        if option_path is not None:
            cfg = cls.load(option_path, root_dir)
        else:
            ini_path = config.getini("soft_assert_config_file") or None
            try:
                cfg = cls.load(ini_path, root_dir)
            except FileNotFoundError:
                logger.info(f"Soft assertion config file {ini_path} not found, using defaults")
                cfg = SoftAssertConfig()

        overrides = cls._session_overrides(config)
        if overrides:
            cfg = cls.merge_configs(cfg, SoftAssertConfig(**overrides))

        return cfg

    @staticmethod
    def _session_overrides(config: pytest.Config) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}

        max_length = config.getini("soft_assert_max_message_length")
        if max_length:
            try:
                overrides["max_message_length"] = int(max_length)
            except ValueError:
                logger.warning(f"Ignoring non-integer soft_assert_max_message_length: {max_length}")

        log_level = config.getoption("soft_assert_log_level")
        if log_level:
            overrides["log_level"] = log_level

        return overrides

    @classmethod
    def load(
        cls,
        config_path: Optional[str | Path] = None,
        root_dir: Optional[Path] = None,
    ) -> SoftAssertConfig:
        """
        Load one YAML file, or the first one found from root_dir upward.

        Args:
            config_path: File to read, relative to root_dir unless absolute.
            root_dir: Where relative paths and the search start. Defaults to cwd.

        Returns:
            The file's configuration, or defaults when no file exists.

        Raises:
            FileNotFoundError: If config_path is given but doesn't exist.
        """
        root_dir = root_dir or Path.cwd()

        if config_path is None:
            path = cls.find_config_file(root_dir)
            if path is None:
                logger.info("No soft assertion configuration file found, using defaults")
                return SoftAssertConfig()
        else:
            path = Path(config_path)
            if not path.is_absolute():
                path = root_dir / path
            if not path.exists():
                raise FileNotFoundError(f"Configuration file not found: {path}")

        logger.info(f"Loading soft assertion configuration from: {path}")
        return SoftAssertConfig.model_validate(cls._read_yaml(path))

    @classmethod
    def find_config_file(cls, start_dir: Path) -> Optional[Path]:
        """First file named in CONFIG_NAMES in start_dir or one of its parents."""
        start = start_dir.resolve()
        for directory in (start, *start.parents):
            for name in cls.CONFIG_NAMES:
                candidate = directory / name
                if candidate.is_file():
                    logger.debug(f"Found soft assertion config file: {candidate}")
                    return candidate
        return None

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def merge_configs(
        cls, base: SoftAssertConfig, override: SoftAssertConfig
    ) -> SoftAssertConfig:
        """Return base updated with the fields explicitly set on override."""
        merged = {**base.model_dump(), **override.model_dump(exclude_unset=True)}
        return SoftAssertConfig.model_validate(merged)
