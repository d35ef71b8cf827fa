"""Domain errors and failure typing."""


class KofError(Exception):
    """Base class for KOF parser failures."""

    error_code = "KOF_ERROR"


class ConfigError(KofError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class InvalidEpsgCodeError(KofError):
    """Raised when a CRS is set to a code missing from the EPSG registry."""

    error_code = "INVALID_EPSG_CODE"


class UnsupportedFileError(KofError):
    """Raised when an input path is not a readable KOF file."""

    error_code = "UNSUPPORTED_FILE"


class ReprojectionError(KofError):
    """Raised when a coordinate transform is unavailable or fails."""

    error_code = "REPROJECTION_UNAVAILABLE"
