# Ling language package
# This package provides a tree-walking interpreter for the Ling language.
from .errors import Diagnostics, LingRuntimeError
from .interpreter import Interpreter, run_file, run_program
from .parser import parse_program

__all__ = [
    'run_program',
    'run_file',
    'parse_program',
    'Interpreter',
    'Diagnostics',
    'LingRuntimeError',
]
