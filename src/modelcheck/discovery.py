"""
Find the concrete, instantiable classes defined under a directory.

Every ``*.py`` file below the directory is imported (recursively). Modules
that are already imported are reused, so classes found here are the same
objects the rest of the program sees. A directory that is not below any
sys.path entry has its package root added to sys.path first, so modules are
imported under their package name and relative imports work.
"""

import importlib
import inspect
import logging
import sys
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def _loaded_module_for(path: Path):
    for module in list(sys.modules.values()):
        module_file = getattr(module, '__file__', None)
        if module_file and Path(module_file).resolve() == path:
            return module
    return None


def _module_name_for(path: Path) -> Optional[str]:
    """Importable dotted name of ``path``, using the deepest sys.path entry."""
    candidates = []
    for entry in sys.path:
        try:
            relative = path.relative_to(Path(entry or '.').resolve())
        except (ValueError, OSError):
            continue
        parts = list(relative.with_suffix('').parts)
        if parts and parts[-1] == '__init__':
            parts = parts[:-1]
        if parts and all(p.isidentifier() for p in parts):
            candidates.append('.'.join(parts))
    if not candidates:
        return None
    return min(candidates, key=lambda name: name.count('.'))


def _package_root(path: Path) -> Path:
    """Parent of the outermost package (directory with __init__.py) holding ``path``."""
    directory = path.parent
    while (directory / '__init__.py').is_file():
        directory = directory.parent
    return directory


def _import_path(path: Path):
    module = _loaded_module_for(path)
    if module is not None:
        return module

    module_name = _module_name_for(path)
    if module_name is None:
        # Not reachable from sys.path: import it from its package root, so
        # relative imports inside the package resolve.
        root = _package_root(path)
        logger.debug(f"Adding {root} to sys.path")
        sys.path.insert(0, str(root))
        importlib.invalidate_caches()
        module_name = _module_name_for(path)
        if module_name is None:
            raise ImportError(f"Cannot import {path}: not a valid module path", path=str(path))

    return importlib.import_module(module_name)


def is_instantiable(cls: type) -> bool:
    """Concrete classes only: no ABCs with abstract methods, no __abstract__ mappings."""
    if inspect.isabstract(cls):
        return False
    if vars(cls).get('__abstract__', False):
        return False
    if getattr(cls, '_is_protocol', False):
        return False
    return True


def list_model_classes(directory) -> List[type]:
    """
    List instantiable classes defined in modules found recursively under
    ``directory``, ordered by file path and then definition order.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Model directory not found: {directory}")

    classes = []
    for path in sorted(root.rglob('*.py')):
        module = _import_path(path)
        for _, obj in vars(module).items():
            if not inspect.isclass(obj) or obj.__module__ != module.__name__:
                continue
            if is_instantiable(obj):
                classes.append(obj)

    logger.debug(f"Found {len(classes)} classes in {directory}")
    return classes
