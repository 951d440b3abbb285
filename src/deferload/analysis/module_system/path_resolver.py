"""
Module Path Resolution

Maps an import specifier, as written in an importing module, to the key of a
module in the current compilation. Keys are POSIX paths relative to the
compilation root (`file1.ts`, `lib/util.ts`).

TypeScript Pattern: ts.resolveModuleName (relative specifiers only)

This class is stateless apart from the set of known keys and can be shared.
"""

import logging
import posixpath
from typing import Iterable, List, Optional

from ...utils.config import INDEX_MODULE_STEM, RELATIVE_SPECIFIER_PREFIXES, SOURCE_EXTENSIONS

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Resolves relative specifiers against the modules of one compilation:

    - ./file1      -> file1, file1.ts, file1.tsx, file1.js, file1.mjs
    - ./lib        -> lib/index.ts, lib/index.tsx, ...
    - some-package -> None (bare specifiers are never part of the compilation)
    """

    def __init__(self, known_modules: Iterable[str] = ()):
        self.known_modules = set(known_modules)

    def add_module(self, key: str) -> None:
        self.known_modules.add(key)

    @staticmethod
    def is_relative(specifier: str) -> bool:
        return specifier.startswith(RELATIVE_SPECIFIER_PREFIXES) or specifier in (".", "..")

    def candidates(self, importing_file: str, specifier: str) -> List[str]:
        """Module keys tried for specifier, in resolution order."""
        base = posixpath.normpath(posixpath.join(posixpath.dirname(importing_file), specifier))
        tried = [base]
        tried.extend(base + ext for ext in SOURCE_EXTENSIONS)
        index = posixpath.join(base, INDEX_MODULE_STEM)
        tried.extend(index + ext for ext in SOURCE_EXTENSIONS)
        return tried

    def resolve(self, importing_file: str, specifier: str) -> Optional[str]:
        if not self.is_relative(specifier):
            logger.debug(f"PathResolver: bare specifier '{specifier}' is external")
            return None
        for key in self.candidates(importing_file, specifier):
            if key in self.known_modules:
                return key
        logger.debug(f"PathResolver: '{specifier}' from {importing_file} not found")
        return None
