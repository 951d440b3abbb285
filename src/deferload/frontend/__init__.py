"""
Frontend: source text -> Module AST.
"""

from .parser import Parser, ParseError
from .postlex import ModulePostLex

__all__ = ['Parser', 'ParseError', 'ModulePostLex']
