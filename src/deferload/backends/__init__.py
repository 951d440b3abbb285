"""
Backends: Module AST -> output text.
"""

from .printer import ModulePrinter, print_module

__all__ = ['ModulePrinter', 'print_module']
