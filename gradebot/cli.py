"""
gradebot command line entry point.

Reads its whole configuration from the environment, writes one result
into the gradebook sheet, and exits 0 on success or 1 on failure.
"""
import argparse
import logging
import sys
from typing import Any, List, Optional

from .config_manager import GradebotConfig
from .errors import GradebotError
from .schemas import TestResults, decode_test_results
from .services.sheets import SheetsClient, authenticate, load_service_account_info
from .update import ResultUpdater, UpdateResult

logger = logging.getLogger(__name__)

EPILOG = """
Environment variables (.env file supported):
  GRADEBOT_TASK_NAME           assignment column header (required)
  GRADEBOT_STUDENT_ID          student GitHub id (required, falls back to GITHUB_ACTOR)
  GRADEBOT_ROBOT_CREDENTIALS   service account JSON, base64 JSON, or key file path (required)
  GRADEBOT_SPREADSHEET_ID      spreadsheet key (required)
  GRADEBOT_TEST_RESULTS        base64 JSON autograder report (required unless GRADEBOT_RESULT is set)
  GRADEBOT_RESULT              explicit value to write instead of the test score
  GRADEBOT_SHEET_NAME          worksheet title (default: Sheet1)
  GRADEBOT_KEY_HEADER          header of the student id column (default: github_id)
  GRADEBOT_READ_RANGE          range read as the snapshot (default: A1:ZZ1000)
  GRADEBOT_MAX_TRIES           attempts on rate limits / server errors (default: 1)
  GRADEBOT_LOG_LEVEL           logging level (default: INFO)
"""


def score_results(results: TestResults) -> int:
    """One point per passing test."""
    return sum(1 if status == "pass" else 0 for _, status in results.pairs())


def result_value(config: GradebotConfig) -> Any:
    if config.result is not None:
        return config.result
    results = decode_test_results(config.test_results)
    for name, status in results.pairs():
        logger.info(f"  {name}: {status}")
    score = score_results(results)
    logger.info(f"{score}/{len(results.tests)} tests passed")
    return score


def run(config: GradebotConfig) -> UpdateResult:
    """Decode the result, authenticate, and write it to the sheet."""
    value = result_value(config)

    info = load_service_account_info(config.robot_credentials)
    credentials = authenticate(info)
    gateway = SheetsClient(credentials, config.spreadsheet_id, config.sheet_name)

    updater = ResultUpdater(gateway, key_header=config.key_header, read_range=config.read_range)
    return updater.update_result_with_retries(
        config.student_id,
        config.task_name,
        value,
        max_tries=config.max_tries
    )


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog='gradebot',
        description='Write an autograding result into the gradebook spreadsheet',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG
    )
    parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    try:
        config = GradebotConfig.from_env()
        logging.getLogger().setLevel(config.log_level)
        result = run(config)
    except GradebotError as e:
        logger.error(f"Update failed [{e.kind.value}]: {e}")
        sys.exit(1)

    logger.info(
        f"Result for task '{result.assignment_name}' of student '{result.github_id}' "
        f"updated at {result.cell_address}"
    )


if __name__ == '__main__':
    main()
