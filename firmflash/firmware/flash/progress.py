"""Progress scraping for the external flashing tool.

The tool has no structured progress channel; its human-oriented output is
scanned for a ``<digits>%`` token. The parser here is stateless; callers
handle deduplication of repeated values.
"""

import re


DEFAULT_PROGRESS_PATTERN = r"(\d+)%"

# Overall progress reserved for the flashing stage: files share 10..90.
FLASH_RANGE_START = 10.0
FLASH_RANGE_SPAN = 80.0
FLASH_MAX_PERCENT = 99.0


class ProgressLineParser:
    """Map one line of tool output to an optional completion percentage.

    Args:
        pattern: Regular expression whose first group captures the digits
    """

    def __init__(self, pattern: str = DEFAULT_PROGRESS_PATTERN) -> None:
        self.pattern = re.compile(pattern)

    def parse(self, line: str) -> int | None:
        """Return the first percentage in ``line`` if it lies in 0..100."""
        match = self.pattern.search(line)
        if match is None:
            return None
        try:
            value = int(match.group(1))
        except (IndexError, ValueError):
            return None
        if 0 <= value <= 100:
            return value
        return None


_default_parser = ProgressLineParser()


def parse_progress_line(line: str) -> int | None:
    """Parse a line with the default ``<digits>%`` pattern."""
    return _default_parser.parse(line)


def file_start_percentage(index: int, total: int) -> float:
    """Overall percentage at which file ``index`` (1-based) of ``total`` starts."""
    return FLASH_RANGE_START + FLASH_RANGE_SPAN * (index - 1) / total


def overall_percentage(index: int, total: int, file_percent: int) -> float:
    """Map a file's own 0..100 progress into its slice of the overall range.

    The result is clamped to [10, 99]; 100 is reserved for completion.
    """
    overall = (
        FLASH_RANGE_START
        + FLASH_RANGE_SPAN * ((index - 1) + file_percent / 100.0) / total
    )
    return min(max(overall, FLASH_RANGE_START), FLASH_MAX_PERCENT)
