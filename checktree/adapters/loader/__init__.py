"""Loaders declaring check definitions on a TreeBuilder."""

from .module_loader import ModuleTreeLoader

__all__ = ["ModuleTreeLoader"]
