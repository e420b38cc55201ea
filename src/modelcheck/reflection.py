"""
Reflection over model classes: which methods they declare, how many
arguments those methods require and what they claim to return.
"""

import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self):
        return 'MISSING'


# No (resolvable) return annotation.
MISSING = _Missing()

_REQUIRED_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


@dataclass(frozen=True)
class MethodInfo:
    """A public instance method as seen on a class."""

    name: str
    declaring_class: type
    function: Callable
    required_parameters: int
    return_annotation: object = MISSING

    @property
    def namespace(self) -> str:
        """Module the method was declared in."""
        return self.declaring_class.__module__


def required_parameter_count(function: Callable) -> int:
    """Number of parameters without defaults, not counting ``self``."""
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return 0

    params = list(signature.parameters.values())[1:]
    return sum(
        1 for p in params
        if p.kind in _REQUIRED_KINDS and p.default is inspect.Parameter.empty
    )


def return_annotation(function: Callable):
    """Resolved return annotation, or MISSING."""
    if 'return' not in getattr(function, '__annotations__', {}):
        return MISSING
    try:
        hints = typing.get_type_hints(function)
    except Exception as e:
        # Forward reference that cannot be resolved here, e.g. a name only
        # imported under TYPE_CHECKING.
        logger.debug(f"Cannot resolve return annotation of {function.__qualname__}: {e}")
        return MISSING
    return hints.get('return', MISSING)


def _method_info(name: str, declaring_class: type, function: Callable) -> MethodInfo:
    return MethodInfo(
        name=name,
        declaring_class=declaring_class,
        function=function,
        required_parameters=required_parameter_count(function),
        return_annotation=return_annotation(function),
    )


def declared_methods(cls: type) -> List[MethodInfo]:
    """
    Public instance methods of ``cls``, including inherited ones.

    Most derived class first, in definition order; a method overridden in a
    subclass is listed once, for the subclass. Properties, static and class
    methods are not instance methods and are left out.
    """
    seen = set()
    methods = []
    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, value in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if name.startswith('_') or not inspect.isfunction(value):
                continue
            methods.append(_method_info(name, klass, value))
    return methods


def get_method(cls: type, name: str) -> Optional[MethodInfo]:
    """MethodInfo for ``cls.name``, or None if it is not an instance method."""
    for klass in cls.__mro__:
        if name in vars(klass):
            value = vars(klass)[name]
            if klass is object or not inspect.isfunction(value):
                return None
            return _method_info(name, klass, value)
    return None
