"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigurationError(PipelineError):
    """Raised for unusable zone data or invalid run configuration."""

    error_code = "CONFIGURATION_ERROR"


class StageError(PipelineError):
    """Raised when a stage cannot read or write its inputs and outputs."""

    error_code = "STAGE_ERROR"
