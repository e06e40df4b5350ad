"""Debug log parsing: line splitting, dispatch, tree building and aggregation."""

from apexlog.parsing.parser import ApexLogParser, parse, parse_file

__all__ = ["ApexLogParser", "parse", "parse_file"]
