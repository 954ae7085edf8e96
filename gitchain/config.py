"""Configuration management for gitchain."""
import logging
import os
import re
from pathlib import Path
from typing import Optional

import tomli
import tomli_w
from pydantic import BaseModel, Field

from .core import Chain, get_debug_mode
from .observers import DebugSink, FileDebugSink, RichDebugSink
from .runner import CommandRunner

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".gitchain.toml"
CONFIG_SECTION = "gitchain"

_STRING_FIELDS = ("shell_type", "shell_flag", "log_file")
_BOOL_FIELDS = ("debug",)


class Config(BaseModel):
    """Configuration settings for gitchain.

    Values come from, in increasing priority: defaults, ``GITCHAIN_*``
    environment variables, the ``[gitchain]`` table of ``.gitchain.toml`` and
    explicit keyword arguments.
    """

    debug: bool = Field(
        default=False,
        description="Emit a debug record for every chain step"
    )

    shell_type: Optional[str] = Field(
        default=None,
        description="Shell used to wrap every command (e.g. bash); unset runs programs directly"
    )

    shell_flag: str = Field(
        default="-c",
        description="Flag passed to the shell before the command string"
    )

    timeout: Optional[float] = Field(
        default=None,
        description="Seconds before a child process is killed"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Append debug records to this file instead of the console"
    )

    @staticmethod
    def _sanitize_string(value: str) -> str:
        """Sanitize string values to prevent injection attacks."""
        if not value:
            return value

        # Remove control characters and null bytes
        value = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', value)

        # Cut at the first command separator
        value = re.split(r'[;&|`$()]', value)[0]

        if len(value) > 1000:
            value = value[:1000]

        return value.strip()

    @staticmethod
    def _is_safe_path(path: str) -> bool:
        """Check if a path is safe (relative, no traversal)."""
        if not path:
            return False

        if '..' in path or path.startswith('/') or '\\' in path:
            return False

        if os.path.isabs(path):
            return False

        return True

    @classmethod
    def load(cls, repo_path: Path) -> 'Config':
        """Load configuration from the config file.

        Args:
            repo_path: Path to the git repository

        Returns:
            Config: Configuration object with values from file or defaults
        """
        config_path = Path(repo_path) / DEFAULT_CONFIG_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with config_path.open('rb') as f:
                config_data = tomli.load(f)

            section = dict(config_data.get(CONFIG_SECTION, {}))

            for key in _STRING_FIELDS:
                if key in section and isinstance(section[key], str):
                    section[key] = cls._sanitize_string(section[key])

            if section.get('log_file') and not cls._is_safe_path(section['log_file']):
                logger.warning("Unsafe log file path '%s', using default", section['log_file'])
                section['log_file'] = None

            return cls(**section)
        except Exception as e:
            # If there's any error reading the config, use defaults
            logger.warning("Error reading config file %s: %s", config_path, e)
            return cls()

    def save(self, repo_path: Path) -> None:
        """Save configuration to the config file.

        Args:
            repo_path: Path to the git repository
        """
        config_path = Path(repo_path) / DEFAULT_CONFIG_FILENAME

        # TOML has no null, so unset values are left out
        config_dict = {k: v for k, v in self.model_dump().items() if v is not None}

        if config_dict.get('log_file') and not self._is_safe_path(config_dict['log_file']):
            logger.warning("Unsafe log file path '%s', not saving", config_dict['log_file'])
            del config_dict['log_file']

        with config_path.open('wb') as f:
            tomli_w.dump({CONFIG_SECTION: config_dict}, f)

    def build_runner(self, path) -> CommandRunner:
        runner = CommandRunner(path, self.debug).with_timeout(self.timeout)
        if self.shell_type:
            runner.with_shell_type(self.shell_type).with_shell_flag(self.shell_flag)
        return runner

    def build_sink(self) -> DebugSink:
        if self.log_file:
            return FileDebugSink(self.log_file)
        return RichDebugSink()

    def open_chain(self, path) -> Chain:
        """Create a chain at ``path`` configured from these settings."""
        chain = Chain.new_with_runner(path, self.build_runner(path), sink=self.build_sink())
        return chain.with_debug_mode(self.debug or get_debug_mode())

    def __init__(self, **data):
        """Initialize config with environment variable support and sanitization."""
        env_data = {}

        env_mapping = {
            'GITCHAIN_DEBUG': 'debug',
            'GITCHAIN_SHELL_TYPE': 'shell_type',
            'GITCHAIN_SHELL_FLAG': 'shell_flag',
            'GITCHAIN_TIMEOUT': 'timeout',
            'GITCHAIN_LOG_FILE': 'log_file',
        }

        for env_var, field_name in env_mapping.items():
            if env_var in os.environ:
                value = os.environ[env_var]

                if field_name in _STRING_FIELDS:
                    value = self._sanitize_string(value)

                if field_name in _BOOL_FIELDS:
                    value = value.lower() in ['true', '1', 'yes', 'on']

                env_data[field_name] = value

        merged_data = {**env_data, **data}

        super().__init__(**merged_data)
