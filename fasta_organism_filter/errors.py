"""
Error handling system for the FASTA Organism Filter.

This module provides error classification, logging, and recovery suggestions
for the problems encountered while reading FASTA files, loading filter lists,
and writing output files.
"""

import logging
import re
from enum import Enum
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from datetime import datetime


class ErrorCategory(Enum):
    """Categories of errors that can occur in the system."""
    INPUT = "input"
    FILTER_FILE = "filter_file"
    OUTPUT = "output"
    DATA = "data"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorAction(Enum):
    """Actions to take when an error occurs."""
    SKIP = "skip"
    FAIL = "fail"
    LOG_AND_CONTINUE = "log_and_continue"


@dataclass
class ErrorContext:
    """Contextual information about an error."""
    operation: str
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    protein_name: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    additional_data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ErrorInfo:
    """Complete information about an error occurrence."""
    category: ErrorCategory
    severity: ErrorSeverity
    action: ErrorAction
    message: str
    original_exception: Exception
    context: ErrorContext
    recovery_suggestions: list[str] = field(default_factory=list)


class FastaFilterError(Exception):
    """Base exception class for FASTA Organism Filter errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext(operation="unknown")
        self.original_exception = original_exception


class InputFileError(FastaFilterError):
    """The source FASTA file is missing or cannot be read."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None, original_exception: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.INPUT,
            severity=ErrorSeverity.CRITICAL,
            context=context,
            original_exception=original_exception
        )


class OutputDirectoryError(FastaFilterError):
    """The output directory cannot be created or written to."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None, original_exception: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.OUTPUT,
            severity=ErrorSeverity.CRITICAL,
            context=context,
            original_exception=original_exception
        )


class FilterFileError(FastaFilterError):
    """A name or taxonomy list file is missing, unreadable, or malformed."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None, original_exception: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.FILTER_FILE,
            severity=ErrorSeverity.CRITICAL,
            context=context,
            original_exception=original_exception
        )


class EmptyFilterFileError(FilterFileError):
    """A list file yielded no usable filter entries."""


class ConfigurationError(FastaFilterError):
    """Invalid processing options or configuration values."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None, original_exception: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            context=context,
            original_exception=original_exception
        )


class ErrorHandler:
    """
    Error handler with classification and recovery suggestions.

    Provides centralized error handling with contextual logging so that the
    command-line entry point can report any failure in a uniform way.
    """

    def __init__(self):
        """Initialize error handler with logger."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def classify_error(self, exception: Exception, context: ErrorContext) -> ErrorInfo:
        """
        Classify an exception and determine appropriate handling strategy.

        Args:
            exception: The exception to classify
            context: Contextual information about the error

        Returns:
            ErrorInfo with classification and recommended action
        """
        if isinstance(exception, FastaFilterError):
            return ErrorInfo(
                category=exception.category,
                severity=exception.severity,
                action=self._determine_action(exception.category, exception.severity),
                message=exception.message,
                original_exception=exception,
                context=context,
                recovery_suggestions=self._get_recovery_suggestions(exception.category)
            )

        category, severity = self._classify_standard_exception(exception, context)

        return ErrorInfo(
            category=category,
            severity=severity,
            action=self._determine_action(category, severity),
            message=str(exception),
            original_exception=exception,
            context=context,
            recovery_suggestions=self._get_recovery_suggestions(category)
        )

    def _classify_standard_exception(self, exception: Exception, context: ErrorContext) -> tuple[ErrorCategory, ErrorSeverity]:
        """Classify standard Python exceptions."""
        if isinstance(exception, re.error):
            return ErrorCategory.FILTER_FILE, ErrorSeverity.CRITICAL

        if isinstance(exception, (FileNotFoundError, PermissionError, IsADirectoryError)):
            if context.operation.startswith("write"):
                return ErrorCategory.OUTPUT, ErrorSeverity.CRITICAL
            return ErrorCategory.INPUT, ErrorSeverity.CRITICAL

        if isinstance(exception, (UnicodeDecodeError, EOFError)):
            return ErrorCategory.INPUT, ErrorSeverity.HIGH

        if isinstance(exception, OSError):
            return ErrorCategory.OUTPUT, ErrorSeverity.HIGH

        if isinstance(exception, (ValueError, KeyError, IndexError)):
            return ErrorCategory.DATA, ErrorSeverity.HIGH

        return ErrorCategory.UNKNOWN, ErrorSeverity.HIGH

    def _determine_action(self, category: ErrorCategory, severity: ErrorSeverity) -> ErrorAction:
        """Determine appropriate action based on error category and severity."""
        if severity == ErrorSeverity.CRITICAL:
            return ErrorAction.FAIL
        if category == ErrorCategory.DATA:
            return ErrorAction.SKIP if severity == ErrorSeverity.LOW else ErrorAction.FAIL
        if category in (ErrorCategory.INPUT, ErrorCategory.OUTPUT, ErrorCategory.FILTER_FILE):
            return ErrorAction.FAIL
        return ErrorAction.FAIL if severity == ErrorSeverity.HIGH else ErrorAction.LOG_AND_CONTINUE

    def _get_recovery_suggestions(self, category: ErrorCategory) -> list[str]:
        """Get recovery suggestions for different error categories."""
        suggestions = {
            ErrorCategory.INPUT: [
                "Verify the FASTA file path is correct",
                "Check that the file is readable",
                "Confirm .gz files are valid gzip archives"
            ],
            ErrorCategory.FILTER_FILE: [
                "Verify the list file path is correct",
                "Check RegEx: lines for invalid regular expressions",
                "Make sure the list file has at least one non-blank line"
            ],
            ErrorCategory.OUTPUT: [
                "Check that the output directory is writable",
                "Verify there is enough free disk space"
            ],
            ErrorCategory.DATA: [
                "Inspect the reported protein entry in the FASTA file",
                "Check the description line for OS=/OX= tags or [Organism] text"
            ],
            ErrorCategory.CONFIGURATION: [
                "Use only one of --organism, --org, --prot, or --tax",
                "Verify configuration file format and syntax"
            ]
        }
        return suggestions.get(category, ["Review error details and system logs"])

    def handle_error(self, exception: Exception, context: ErrorContext) -> ErrorInfo:
        """
        Handle an error with appropriate logging and classification.

        Args:
            exception: The exception to handle
            context: Contextual information about the error

        Returns:
            ErrorInfo with handling details
        """
        error_info = self.classify_error(exception, context)

        self._log_error(error_info)

        return error_info

    def _log_error(self, error_info: ErrorInfo) -> None:
        """Log error with contextual information."""
        log_data = {
            "error_category": error_info.category.value,
            "error_severity": error_info.severity.value,
            "recommended_action": error_info.action.value,
            "operation": error_info.context.operation,
            "file_path": error_info.context.file_path,
            "line_number": error_info.context.line_number,
            "protein_name": error_info.context.protein_name,
            "timestamp": error_info.context.timestamp.isoformat(),
            "exception_type": type(error_info.original_exception).__name__,
            "recovery_suggestions": error_info.recovery_suggestions
        }

        if error_info.context.additional_data:
            log_data.update(error_info.context.additional_data)

        if error_info.severity == ErrorSeverity.CRITICAL:
            self.logger.critical("%s", error_info.message, extra=log_data)
        elif error_info.severity == ErrorSeverity.HIGH:
            self.logger.error("%s", error_info.message, extra=log_data,
                              exc_info=error_info.original_exception)
        elif error_info.severity == ErrorSeverity.MEDIUM:
            self.logger.warning("%s", error_info.message, extra=log_data)
        else:
            self.logger.info("%s", error_info.message, extra=log_data)


# Global error handler instance
_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler


def set_error_handler(handler: Optional[ErrorHandler]) -> None:
    """Set the global error handler instance."""
    global _error_handler
    _error_handler = handler


def handle_error(exception: Exception, context: ErrorContext) -> ErrorInfo:
    """
    Convenience function to handle errors using the global error handler.

    Args:
        exception: The exception to handle
        context: Contextual information about the error

    Returns:
        ErrorInfo with handling details
    """
    return get_error_handler().handle_error(exception, context)


def create_error_context(
    operation: str,
    file_path: Optional[str] = None,
    line_number: Optional[int] = None,
    protein_name: Optional[str] = None,
    **additional_data
) -> ErrorContext:
    """
    Convenience function to create error context.

    Args:
        operation: Name of the operation being performed
        file_path: File being read or written
        line_number: Line number within a list file
        protein_name: Name of the protein entry being processed
        **additional_data: Additional contextual data

    Returns:
        ErrorContext instance
    """
    return ErrorContext(
        operation=operation,
        file_path=file_path,
        line_number=line_number,
        protein_name=protein_name,
        additional_data=additional_data
    )
