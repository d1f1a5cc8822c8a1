"""Exception hierarchy for the Jobsuche tools."""


class JobsucheError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(JobsucheError):
    """Configuration is invalid. Fatal at startup."""


class UpstreamError(JobsucheError):
    """A single call to the Jobsuche API failed (transport or HTTP status)."""


class UpstreamDecodeError(UpstreamError):
    """The Jobsuche API answered, but the payload did not have the expected shape."""


class UnknownToolError(JobsucheError):
    """The host asked for a tool that is not registered."""
