"""
Module AST Transformers
=======================

Specialized transformers for different AST node types.
"""

from .base import ModuleTransformer
from .literals import LiteralParser
from .functions import FunctionDefinitionParser

__all__ = [
    'ModuleTransformer',
    'LiteralParser',
    'FunctionDefinitionParser',
]
