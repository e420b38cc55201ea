"""
modelcheck: validate ORM model classes and the relations between them.

Import order matters! Follow dependency chain:
1. Exceptions and relation kinds (no dependencies)
2. Session binding and relation objects
3. Base capabilities and mixins (models import these)
4. Configuration and reflection
5. Validators
6. ModelValidator (drives everything)
"""

# 1. Exceptions and kinds
from .exceptions import (
    ModelCheckError,
    ConfigError,
    NoSessionError,
    ValidationFailure,
    InstanceKindError,
    InvalidRelationError,
    BackRelationError,
    MissingBackRelationError,
    IncompatibleBackRelationError,
    UnknownRelationKindError,
)
from .relations.kinds import RelationKind, expected_inverse_kinds

# 2. Session and relations
from .session import bind_session, create_modelcheck_engine, current_session, get_session
from .relations.relation import (
    Relation,
    BelongsTo,
    HasOneOrMany,
    HasOne,
    HasMany,
    MorphTo,
    MorphOneOrMany,
    MorphOne,
    MorphMany,
    BelongsToMany,
    HasManyThrough,
    HasOneThrough,
)

# 3. Base
from .base import Model, RelationsMixin, SessionMixin, is_mapped_class, qualified_name

# 4. Configuration and reflection
from .config import ALL_METHODS, ValidationConfig, config_from_env, load_config
from .discovery import list_model_classes
from .reflection import MethodInfo, declared_methods, get_method

# 5. Validators
from .validate.registry import RelationEdge, RelationRegistry
from .validate.classifier import ClassifiedRelation, MethodClassifier, NotApplicable
from .validate.executor import execute
from .validate.instance import validate_instance
from .validate.back_relations import verify_back_relations
from .validate.mapped import MappedRelationship, mapped_relationships
from .sinks import AssertionSink, CollectingSink, StrictSink, UnitTestSink

# 6. Orchestration
from .validator import ModelValidator, run

__version__ = '0.1.0'
