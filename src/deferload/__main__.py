"""CLI entry point: `deferload file1.ts file2.ts` or `python -m deferload ...`."""

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .compiler.driver import CompilerDriver
    from .shared.serialization import serialize_ast
    from .utils.io_utils import module_key, read_source_file, write_output_file

    parser = argparse.ArgumentParser(
        prog="deferload",
        description="Rewrite calls of imported async functions into deferred module loads.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="TypeScript/JavaScript modules to compile")
    parser.add_argument("--root", type=Path, default=None,
                        help="Compilation root (default: common parent of the inputs)")
    parser.add_argument("--out-dir", type=Path, default=None,
                        help="Write outputs under this directory instead of stdout")
    parser.add_argument("--dump-ast", action="store_true", help="Print the rewritten ASTs as S-expressions")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    paths = [p.resolve() for p in args.files]
    for path in paths:
        if not path.is_file():
            sys.stderr.write(f"deferload: error: file not found: {path}\n")
            return 1

    if args.root is not None:
        root = args.root.resolve()
    else:
        root = Path(os.path.commonpath([str(p.parent) for p in paths]))

    sources = {}
    try:
        for path in paths:
            sources[module_key(path, root)] = read_source_file(path)
    except (OSError, ValueError) as e:
        sys.stderr.write(f"deferload: error: could not read input: {e}\n")
        return 1

    result = CompilerDriver().compile(sources)
    if not result.success:
        if result.reporter is not None and result.reporter.has_errors():
            sys.stderr.write(result.reporter.format_all_errors() + "\n")
        else:
            sys.stderr.write("deferload: compilation failed\n")
        return 1

    if args.dump_ast:
        for key, module in result.modules.items():
            sys.stdout.write(f";; {key}\n{serialize_ast(module)}\n")
        return 0

    for name, text in result.outputs.items():
        if args.out_dir is not None:
            written = write_output_file(args.out_dir / name, text)
            logging.getLogger(__name__).debug(f"Wrote {written}")
        else:
            sys.stdout.write(f"// {name}\n{text}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
