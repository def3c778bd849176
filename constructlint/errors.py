class ConstructLintError(Exception):
    """Base class for errors raised by constructlint."""


class AssemblyLoadError(ConstructLintError):
    """A jsii manifest could not be read or is malformed."""


class ConfigError(ConstructLintError):
    """The constructlint.yaml configuration file is invalid."""


class ResourceConstructionError(ConstructLintError):
    """A class reached the resource model builder without the tags it needs."""
