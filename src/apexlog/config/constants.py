"""Parsing constants.

This module contains values fixed by the Apex debug log format itself.
They are not user-configurable; for configurable values see models.py
(ParserConfig, ReportConfig).
"""

DEFAULT_FIELD_DELIMITER = "|"
"""Separator between the fields of one record."""

DEFAULT_NAMESPACE = "default"
"""Namespace of events that do not belong to a managed package."""

MANAGED_PACKAGE_EVENT = "ENTERING_MANAGED_PKG"
"""Record type marking a transition into a managed package namespace."""

ROOT_TEXT = "LOG_ROOT"
"""Display text of the synthetic root event."""

EXCEPTION_SUMMARY_MAX = 99
"""Cut-off for single-line exception summaries raised as issues."""
