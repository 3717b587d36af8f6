class RubricDefinitionError(Exception):
    """Raised when a rubric definition is malformed or its ceiling does not match the expected value."""

    pass


class ConfigError(Exception):
    """Raised when the configuration file is missing or contains invalid values."""

    pass
