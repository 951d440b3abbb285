"""
Configuration constants for the deferred import pass and its host harness.
"""

# Type names whose call signatures produce a deferred result
DEFERRED_RESULT_TYPE_NAMES = frozenset({"Promise"})

# Export slot read off the loaded module object for default bindings
DEFAULT_EXPORT = "default"

# Shape of the emitted deferred load: import(path).then(m => m[export](...))
CONTINUATION_METHOD = "then"
MODULE_PARAMETER_NAME = "m"

# Module resolution
SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".mjs")
INDEX_MODULE_STEM = "index"
OUTPUT_EXTENSION = ".js"
RELATIVE_SPECIFIER_PREFIXES = ("./", "../")

# Printer
INDENT = "    "

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Error codes
E_PARSE = "E0001"
E_CONFIGURATION = "E0100"
E_IMPLEMENTATION = "E9999"
