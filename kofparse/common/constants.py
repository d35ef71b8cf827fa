"""Application constants."""

LOGGER_NAME = "kofparse"
KOF_EXTENSION = ".kof"

ELEVATION_SENTINEL = -500.0

DEFAULT_HEADER = "-05 PPPPPPPPPP KKKKKKKK XXXXXXXX.XXX YYYYYYY.YYY ZZZZ.ZZZ"
HEADER_MARKER = "-05"

PARSER_MODES = ("auto", "columns", "tokens")
DEFAULT_ENCODINGS = ("utf-8", "cp1252")

# Key used when trailing row tokens hold no key=value pairs.
EXTRA_ATTRS_KEY = "_extra"
# Key used when an attribute record holds no key=value pairs.
RAW_ATTRS_KEY = "_raw"

GROUP_START = 91
GROUP_END_LINE = 99
GROUP_END_POLYGON = 96
SAW_CODES = range(72, 80)
WAVE_CODES = range(82, 90)
UNSUPPORTED_09_CODES = (90, 92, 93, 94)

JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "file",
    "line",
    "event",
    "status",
    "strategy",
    "error_code",
    "geometries",
    "warnings",
    "message",
)
