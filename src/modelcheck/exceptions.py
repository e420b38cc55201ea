"""
Custom exceptions for modelcheck.
"""


class ModelCheckError(Exception):
    """Base exception for all modelcheck errors."""
    pass


class ConfigError(ModelCheckError):
    """Raised for configuration errors."""
    pass


class NoSessionError(ModelCheckError):
    """Raised when a relation is executed without a database session."""
    pass


class ValidationFailure(ModelCheckError):
    """Raised by StrictSink when a plain assertion fails."""
    pass


class InstanceKindError(ModelCheckError):
    """Raised when a class is not an instance of its required base type(s)."""
    pass


class InvalidRelationError(ModelCheckError):
    """Raised when a relation method fails or returns a wrong-shaped result."""
    pass


class BackRelationError(ModelCheckError):
    """Base exception for back-relation consistency errors."""

    def __init__(self, message, edge=None):
        super().__init__(message)
        self.edge = edge


class MissingBackRelationError(BackRelationError):
    """Raised when the related model has no relation pointing back."""
    pass


class IncompatibleBackRelationError(BackRelationError):
    """Raised when the back-relation exists but has the wrong kind."""
    pass


class UnknownRelationKindError(BackRelationError):
    """Raised when a relation kind has no known inverse kinds."""
    pass
