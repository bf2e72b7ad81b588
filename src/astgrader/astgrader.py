"""Entry point for the astgrader static grader

Loads the assignment configuration, parses the learner's JavaScript
submission, runs the rubric against it and hands the results to the
configured sinks (report files and the results service).

The submission is never executed: every check only inspects its syntax tree.
"""

import argparse
import logging
import pathlib
import sys
from typing import List, Optional

import httpx
import yaml

from astgrader import __version__
from astgrader.base_check import Category
from astgrader.engine import GradingEngine
from astgrader.errors import (
    ConfigurationError,
    ExternalSinkError,
    SubmissionParseError,
)
from astgrader.registry import CheckRegistry, default_registry
from astgrader.report import ReportBundle
from astgrader.sinks import (
    BaseSink,
    DEFAULT_TIMEOUT_SEC,
    ResultPublisher,
    TextReportWriter,
    XmlReportWriter,
    clean_outputs,
)
from astgrader.syntax_tree import Program, parse_source

# Settings
DEFAULT_ASSIGNMENT_ID = "d805050e-a0d8-49b0-afbd-46a486105170"
DEFAULT_SUBMISSION = "../index.js"
DEFAULT_CUSTOM_DATA = "../custom.ih"
DEFAULT_SOURCE_TYPE = "script"
DEFAULT_PER_RECORD = True
DEFAULT_SKIP = False
DEFAULT_REPORTS = {
    "functional": "./output_revised.txt",
    "boundary": "./output_boundary_revised.txt",
    "exception": "./output_exception_revised.txt",
    "xml": "./yaksha-test-cases.xml",
}

# Configure logging
logger = logging.getLogger(__package__)

################################################################################
# Module-level functions

def configure_logging(logger_level: int) -> None:
    """Configure logging for the grader

    Args:
        logger_level (int): Logging level to set
    """
    logging.basicConfig(
        level=logger_level,
        format="%(asctime)s %(name)s [%(levelname)s]: %(message)s",
        force=True,
        handlers=[logging.StreamHandler()],
    )
    logger.setLevel(logger_level)
    logger.debug(f"Logging configured at level: {logger_level}")

def load_config(config_path: pathlib.Path) -> dict:
    """Load the grader configuration from a YAML file

    Args:
        config_path (pathlib.Path): Path to the configuration file

    Returns:
        dict: Configuration dictionary (empty for an empty file)

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping
    """
    try:
        with open(config_path, 'r') as config_file:
            config = yaml.safe_load(config_file)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load configuration {config_path}: {e}") from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration {config_path} must be a mapping")
    logger.info(f"Loaded configuration from {config_path}")
    return config

################################################################################
# Classes

class Autograder:
    """Main class for the grader

    This class is responsible for loading the assignment configuration,
    running the grading process, and handing the results to the sinks.
    """

    def __init__(
            self,
            config_path: Optional[str] = None,
            submission_path: Optional[str] = None,
            assignment_id: Optional[str] = None,
            http_client: Optional[httpx.Client] = None,
        ):
        """Initialize the grader

        Args:
            config_path (str, optional): Path to the configuration file (YAML
                format). The built-in rubric is used when omitted.
            submission_path (str, optional): Path to the submission. Overrides
                the `submission` key of the configuration.
            assignment_id (str, optional): Base identifier for result keys.
                Overrides the `assignment_id` key of the configuration.
            http_client (httpx.Client, optional): Client used by the results
                publisher.

        Raises:
            ConfigurationError: If the configuration is invalid
        """

        # Load configuration; relative paths resolve against its directory
        if config_path:
            self._config_path = pathlib.Path(config_path).resolve()
            self._config = load_config(self._config_path)
            self._base_path = self._config_path.parent
        else:
            self._config_path = None
            self._config = {}
            self._base_path = pathlib.Path.cwd()
        logger.debug(f"Configuration: {self._config}")

        self._assignment_id = str(
            assignment_id or self._config.get("assignment_id", DEFAULT_ASSIGNMENT_ID)
        )

        if submission_path:
            self._submission_path = pathlib.Path(submission_path).resolve()
        else:
            self._submission_path = self._resolve(
                self._config.get("submission", DEFAULT_SUBMISSION)
            )
        self._source_type = self._config.get("source_type", DEFAULT_SOURCE_TYPE)
        if self._source_type not in ("script", "module"):
            raise ConfigurationError(f"Unknown source type: {self._source_type}")

        custom_data = self._config.get("custom_data", DEFAULT_CUSTOM_DATA)
        self._custom_data_path = self._resolve(custom_data) if custom_data else None

        # Build the rubric
        if "checks" in self._config:
            self._registry = CheckRegistry.from_config(self._config["checks"])
        else:
            self._registry = default_registry()
        logger.info(f"Loaded checks: {self._registry.names}")

        self._report_paths = self._load_report_paths()
        self._sinks = self._build_sinks(http_client)

    @property
    def registry(self) -> CheckRegistry:
        return self._registry

    @property
    def report_paths(self) -> List[pathlib.Path]:
        """Get the report files managed by the grader"""
        return list(self._report_paths.values())

    def grade(self) -> ReportBundle:
        """Run the grading process

        Returns:
            ReportBundle: The results, whether or not every sink succeeded

        Raises:
            SubmissionParseError: If the submission cannot be read or parsed
            OSError: If a stale report file cannot be removed
        """
        logger.info("Starting grading process")

        # Remove stale reports from previous runs
        clean_outputs(self.report_paths, logger=logger)

        tree = self.read_submission()
        metadata = self.read_custom_data()

        engine = GradingEngine(self._assignment_id)
        bundle = engine.run(tree, self._registry, metadata)

        # A failing sink does not stop the others
        for sink in self._sinks:
            sink_name = type(sink).__name__
            try:
                sink.write(bundle)
                logger.debug(f"Results handed to {sink_name}")
            except ExternalSinkError as e:
                logger.error(f"{sink_name} failed: {e}")

        logger.info(f"Total score: {bundle.total_score}/{bundle.max_score}")
        if not bundle.accepted:
            logger.warning("Submission failed at least one mandatory check")
        return bundle

    def close(self) -> None:
        """Release the HTTP client of the results publisher"""
        for sink in self._sinks:
            if isinstance(sink, ResultPublisher):
                sink.close()

    def read_submission(self) -> Program:
        """Read and parse the submission

        Raises:
            SubmissionParseError: If the file is missing, unreadable or invalid
        """
        try:
            source = self._submission_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SubmissionParseError(
                f"Error reading submission {self._submission_path}: {e}"
            ) from e
        logger.info(f"Read submission from {self._submission_path}")
        return parse_source(source, self._source_type)

    def read_custom_data(self) -> str:
        """Read the custom data passed through to the results service

        A missing file is not an error; the metadata is then empty.
        """
        if self._custom_data_path is None:
            return ""
        try:
            return self._custom_data_path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Error reading custom data file {self._custom_data_path}: {e}")
            return ""

    def _resolve(self, path: str) -> pathlib.Path:
        path = pathlib.Path(path)
        if not path.is_absolute():
            path = self._base_path / path
        return path.resolve()

    def _load_report_paths(self) -> dict:
        reports = self._config.get("reports", DEFAULT_REPORTS)
        if reports is None:
            return {}
        if not isinstance(reports, dict):
            raise ConfigurationError("'reports' must be a mapping")

        allowed = {category.value for category in Category} | {"xml"}
        unknown = set(reports) - allowed
        if unknown:
            raise ConfigurationError(f"Unknown report types: {sorted(unknown)}")
        return {name: self._resolve(path) for name, path in reports.items() if path}

    def _build_sinks(self, http_client: Optional[httpx.Client]) -> List[BaseSink]:
        sinks: List[BaseSink] = []

        text_paths = {
            name: path for name, path in self._report_paths.items() if name != "xml"
        }
        if text_paths:
            sinks.append(TextReportWriter(text_paths, logger=logger))
        if "xml" in self._report_paths:
            sinks.append(XmlReportWriter(self._report_paths["xml"], logger=logger))

        publish = self._config.get("publish") or {}
        if not isinstance(publish, dict):
            raise ConfigurationError("'publish' must be a mapping")
        if publish.get("skip", DEFAULT_SKIP):
            logger.info("Skipping result publishing")
        elif publish.get("url"):
            sinks.append(
                ResultPublisher(
                    publish["url"],
                    client=http_client,
                    per_record=publish.get("per_record", DEFAULT_PER_RECORD),
                    timeout=publish.get("timeout_sec", DEFAULT_TIMEOUT_SEC),
                    logger=logger,
                )
            )
        return sinks

################################################################################
# Main entry point

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point

    Returns:
        int: Process exit code
    """

    # Command line arguments
    parser = argparse.ArgumentParser(description="Static JavaScript Grader")
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Path to configuration file (YAML format). The built-in rubric is used "
            "when omitted.",
    )
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--id",
        "-i",
        type=str,
        help="Assignment identifier used to key the results",
    )
    parser.add_argument(
        "--submission",
        "-s",
        type=str,
        help="Path to the submission source file",
    )

    # Parse arguments
    args = parser.parse_args(argv)

    # If debug mode is enabled, set logging to DEBUG level
    if args.debug:
        configure_logging(logging.DEBUG)
    else:
        configure_logging(logging.INFO)

    # Print welcome message
    logger.info(f"astgrader v{__version__}")

    try:
        autograder = Autograder(
            config_path=args.config,
            submission_path=args.submission,
            assignment_id=args.id,
        )
        try:
            autograder.grade()
        finally:
            autograder.close()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except SubmissionParseError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Failed to prepare report files: {e}")
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
