"""
Sinks that persist or transmit grading results.

Sinks receive a finished ReportBundle and never change it. Each one handles
its own I/O and reports failures as `ExternalSinkError`.
"""

from abc import ABC, abstractmethod
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union
import xml.etree.ElementTree as ET

import httpx

from astgrader.errors import ConfigurationError, ExternalSinkError
from astgrader.report import ReportBundle, ResultRecord

# Settings
DEFAULT_TIMEOUT_SEC = 10.0

PathLike = Union[str, Path]

################################################################################
# Module-level functions

def clean_outputs(paths: Iterable[PathLike], logger: logging.Logger = None) -> List[Path]:
    """Delete report files left over from a previous run

    Args:
        paths (Iterable[PathLike]): Files to remove if they exist.
        logger (logging.Logger, optional): Logger instance for logging messages.

    Returns:
        List[Path]: The files that were deleted.
    """
    logger = logger if logger is not None else logging.getLogger(__name__)
    deleted = []
    for path in paths:
        path = Path(path)
        if path.is_file():
            path.unlink()
            logger.info(f"Deleted: {path}")
            deleted.append(path)
    return deleted

def to_wire(record: ResultRecord) -> dict:
    """Shape a record the way the results service expects it"""
    return {
        "methodName": record.check_name,
        "methodType": record.category.value,
        "actualScore": record.max_score,
        "earnedScore": record.earned_score,
        "status": record.status.value,
        "isMandatory": record.mandatory,
        "errorMessage": record.feedback,
    }

################################################################################
# Classes

class BaseSink(ABC):
    """Abstract base class for sinks.

    Subclasses implement `write_record`, which is called once per record in
    bundle order. Sinks that send a bundle in one go override `write`.
    """

    def __init__(self, logger: logging.Logger = None):
        """Initialize the sink.

        Args:
            logger (logging.Logger, optional): Logger instance for logging messages.
        """
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def write(self, bundle: ReportBundle) -> None:
        """Hand every record of the bundle to the sink

        Raises:
            ExternalSinkError: If the sink fails.
        """
        for key, record in bundle.items():
            self.write_record(key, record, bundle.metadata)

    @abstractmethod
    def write_record(self, key: str, record: ResultRecord, metadata: str) -> None:
        """Persist or transmit a single record

        Args:
            key (str): Stable key of the record.
            record (ResultRecord): The record.
            metadata (str): Bundle metadata.
        """
        pass

class ResultPublisher(BaseSink):
    """Posts results as JSON to the results service

    Args:
        url (str): Endpoint to post to.
        client (httpx.Client, optional): HTTP client to use. One is created
            (and owned) when not given.
        per_record (bool, optional): Send one request per record instead of
            one for the whole bundle. Defaults to True.
        timeout (float, optional): Request timeout in seconds for an owned
            client.
        logger (logging.Logger, optional): Logger instance for logging messages.
    """

    def __init__(
        self,
        url: str,
        client: Optional[httpx.Client] = None,
        per_record: bool = True,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        logger: logging.Logger = None,
    ):
        super().__init__(logger)
        if not url:
            raise ConfigurationError("Publish URL is required")
        try:
            httpx.URL(url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid publish URL {url!r}: {e}") from e
        self._url = url
        self._per_record = per_record
        if client is None:
            self._client = httpx.Client(timeout=timeout)
            self._owns_client = True
        else:
            self._client = client
            self._owns_client = False

    def write(self, bundle: ReportBundle) -> None:
        if self._per_record:
            super().write(bundle)
            return
        payload = {
            "testCaseResults": {key: to_wire(record) for key, record in bundle.items()},
            "customData": bundle.metadata,
        }
        self._post(payload)

    def write_record(self, key: str, record: ResultRecord, metadata: str) -> None:
        payload = {
            "testCaseResults": {key: to_wire(record)},
            "customData": metadata,
        }
        self._post(payload)

    def _post(self, payload: dict) -> None:
        self.logger.debug(f"Sending results to {self._url}: {payload}")
        try:
            response = self._client.post(self._url, json=payload)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ExternalSinkError(f"Failed to publish results to {self._url}: {e}") from e
        self.logger.debug(f"Server response: {response.status_code} {response.text}")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ResultPublisher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

class TextReportWriter(BaseSink):
    """Appends `<check>=PASS|FAIL` lines to one text file per category

    Args:
        paths (Dict[str, PathLike]): Output file for each category value.
            Records whose category has no file are skipped.
        logger (logging.Logger, optional): Logger instance for logging messages.
    """

    def __init__(self, paths: Dict[str, PathLike], logger: logging.Logger = None):
        super().__init__(logger)
        self._paths = {category: Path(path) for category, path in paths.items()}

    def write_record(self, key: str, record: ResultRecord, metadata: str) -> None:
        path = self._paths.get(record.category.value)
        if path is None:
            self.logger.debug(f"No report file for category '{record.category.value}'")
            return
        status = "PASS" if record.passed else "FAIL"
        try:
            with open(path, "a", encoding="utf-8") as report_file:
                report_file.write(f"{record.check_name}={status}\n")
        except OSError as e:
            raise ExternalSinkError(f"Failed to write report {path}: {e}") from e

class XmlReportWriter(BaseSink):
    """Accumulates results into a `<test-cases>` XML document

    Args:
        path (PathLike): The XML file. Cases are appended to an existing
            document.
        logger (logging.Logger, optional): Logger instance for logging messages.
    """

    def __init__(self, path: PathLike, logger: logging.Logger = None):
        super().__init__(logger)
        self._path = Path(path)

    def write_record(self, key: str, record: ResultRecord, metadata: str) -> None:
        try:
            if self._path.is_file():
                tree = ET.parse(self._path)
            else:
                tree = ET.ElementTree(ET.Element("test-cases"))

            case = ET.SubElement(tree.getroot(), "case")
            ET.SubElement(case, "test-case-type").text = record.category.value
            ET.SubElement(case, "name").text = record.check_name
            ET.SubElement(case, "status").text = record.status.value

            ET.indent(tree)
            tree.write(self._path, encoding="utf-8", xml_declaration=True)
        except (OSError, ET.ParseError) as e:
            raise ExternalSinkError(f"Failed to write XML report {self._path}: {e}") from e
