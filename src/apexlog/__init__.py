"""apexlog - Apex debug log parser.

Rebuilds the call tree of a Salesforce Apex debug log, with timings,
governor limit usage and the issues found along the way.
"""

from apexlog.events.models import ApexLog, LogEvent, LogIssue
from apexlog.parsing import ApexLogParser, parse, parse_file

__version__ = "0.1.0"

__all__ = ["ApexLog", "ApexLogParser", "LogEvent", "LogIssue", "parse", "parse_file"]
