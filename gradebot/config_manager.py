"""
Configuration for a gradebot run.

Every field comes from the process environment (optionally seeded from a
.env file) and is read once at startup.
"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .core.resolver import DEFAULT_KEY_HEADER
from .errors import ConfigError, ConfigMissingError

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Sheet1"
DEFAULT_READ_RANGE = "A1:ZZ1000"


@dataclass(frozen=True)
class GradebotConfig:
    """Settings for a single result update."""
    task_name: str
    student_id: str
    robot_credentials: str
    spreadsheet_id: str
    sheet_name: str = DEFAULT_SHEET_NAME
    test_results: Optional[str] = None
    result: Optional[str] = None
    key_header: str = DEFAULT_KEY_HEADER
    read_range: str = DEFAULT_READ_RANGE
    max_tries: int = 1
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GradebotConfig":
        """
        Build the configuration from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ`` (the .env file is
                only loaded when reading the real environment)

        Raises:
            ConfigMissingError: Listing every required variable that is unset
        """
        if env is None:
            load_dotenv()
            env = os.environ

        def get(name: str) -> Optional[str]:
            value = env.get(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        task_name = get("GRADEBOT_TASK_NAME")
        student_id = get("GRADEBOT_STUDENT_ID") or get("GITHUB_ACTOR")
        robot_credentials = get("GRADEBOT_ROBOT_CREDENTIALS")
        spreadsheet_id = get("GRADEBOT_SPREADSHEET_ID")
        test_results = get("GRADEBOT_TEST_RESULTS")
        result = get("GRADEBOT_RESULT")

        missing = []
        if not task_name:
            missing.append("GRADEBOT_TASK_NAME")
        if not student_id:
            missing.append("GRADEBOT_STUDENT_ID")
        if not robot_credentials:
            missing.append("GRADEBOT_ROBOT_CREDENTIALS")
        if not spreadsheet_id:
            missing.append("GRADEBOT_SPREADSHEET_ID")
        if test_results is None and result is None:
            missing.append("GRADEBOT_TEST_RESULTS")
        if missing:
            raise ConfigMissingError(missing)

        max_tries_raw = get("GRADEBOT_MAX_TRIES") or "1"
        try:
            max_tries = int(max_tries_raw)
        except ValueError:
            raise ConfigError(f"GRADEBOT_MAX_TRIES must be an integer, got {max_tries_raw!r}")
        if max_tries < 1:
            raise ConfigError(f"GRADEBOT_MAX_TRIES must be at least 1, got {max_tries}")

        log_level = (get("GRADEBOT_LOG_LEVEL") or "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"GRADEBOT_LOG_LEVEL is not a logging level: {log_level!r}")

        config = cls(
            task_name=task_name,
            student_id=student_id,
            robot_credentials=robot_credentials,
            spreadsheet_id=spreadsheet_id,
            sheet_name=get("GRADEBOT_SHEET_NAME") or DEFAULT_SHEET_NAME,
            test_results=test_results,
            result=result,
            key_header=get("GRADEBOT_KEY_HEADER") or DEFAULT_KEY_HEADER,
            read_range=get("GRADEBOT_READ_RANGE") or DEFAULT_READ_RANGE,
            max_tries=max_tries,
            log_level=log_level,
        )
        logger.debug(f"Loaded configuration for task '{config.task_name}', student '{config.student_id}'")
        return config
