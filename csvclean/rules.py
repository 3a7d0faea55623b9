"""
Fixed cleaning rules.

This file exists to make non-goals explicit and enforceable:
one encoding, one replacement, one line terminator.
"""

REQUIRED_ENCODING = "windows-1252"
REPLACEMENT = ">"
EOL = "\r\n"
CSV_SUFFIX = ".csv"
TMP_SUFFIX = ".tmp"
