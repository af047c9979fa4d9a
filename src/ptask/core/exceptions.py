"""
Exception hierarchy for ptask.

Everything raised by the engine derives from PtaskError so callers (and the
CLI) can catch one type.
"""


class PtaskError(Exception):
    """Base class for all ptask errors."""


class CatalogError(PtaskError):
    """The catalog snapshot cannot drive a configuration session."""


class CatalogNotFoundError(CatalogError):
    def __init__(self, location: str):
        self.location = location
        super().__init__(f"Catalog not found: {location}")


class ValidationError(PtaskError):
    """A selection request was rejected; the selection set is unchanged."""


class SelectionNotAllowedError(ValidationError):
    def __init__(self, parameter_id: str):
        self.parameter_id = parameter_id
        super().__init__(f"Parameter is not currently available: {parameter_id}")


class UnknownParameterError(ValidationError):
    def __init__(self, parameter_id: str):
        self.parameter_id = parameter_id
        super().__init__(f"Unknown parameter: {parameter_id}")


class UnknownOptionError(ValidationError):
    def __init__(self, parameter_id: str, option_id: str):
        self.parameter_id = parameter_id
        self.option_id = option_id
        super().__init__(f"Option {option_id} is not allowed for parameter {parameter_id}")


class StaleCatalogWarning(UserWarning):
    """Selections were dropped because the catalog no longer supports them."""
