"""Compiler driver."""

from .driver import CompilationResult, CompilerDriver, output_name

__all__ = ['CompilationResult', 'CompilerDriver', 'output_name']
