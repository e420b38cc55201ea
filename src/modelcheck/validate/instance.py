"""
Base-type checks run on a class before its methods are scanned.
"""

import logging

from ..base import Model, qualified_name
from ..config import ValidationConfig
from ..exceptions import InstanceKindError

logger = logging.getLogger(__name__)


def validate_instance(cls: type, config: ValidationConfig) -> bool:
    """
    Check ``cls`` against its required or allowed base types.

    A per-model required base type overrides the allowed base types.

    Returns:
        True if the class passed and its methods should be scanned,
        False if it is a non-model skipped because allow_non_models is set.

    Raises:
        InstanceKindError: if the class is not a subclass of the required
            base type or of any allowed base type.
    """
    name = qualified_name(cls)

    required = config.required_base_type_for(cls)
    if required is not None:
        if not issubclass(cls, required):
            raise InstanceKindError(f"{name} must be a subclass of {qualified_name(required)}")
        return True

    if any(issubclass(cls, allowed) for allowed in config.allowed_base_types):
        return True

    if config.allow_non_models and not issubclass(cls, Model):
        logger.debug(f"Skipping non-model class {name}")
        return False

    allowed_names = ','.join(qualified_name(t) for t in config.allowed_base_types)
    raise InstanceKindError(f"{name} must be a subclass of {allowed_names}")
