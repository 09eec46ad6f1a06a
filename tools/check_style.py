#!/usr/bin/env python3
"""Check for banned Python constructions in minquote source.

Banned constructions:

    Construction          Reason                            Use instead
    --------------------  --------------------------------  --------------------------
    import shlex          shlex.quote is not minimal        minquote.core.quoter.quote
    import pipes          removed in Python 3.13            minquote.core.quoter.quote
    import subprocess     quoting never runs a shell        minquote.core.parser.unquote
    os.system, os.popen   quoting never runs a shell        minquote.core.parser.unquote

Tests may import shlex and subprocess; shlex is the baseline minquote is
measured against and a real shell checks the round trip.
"""

import ast
import os
import sys

BANNED_MODULES = {
    "shlex": "use minquote.core.quoter / minquote.core.parser",
    "pipes": "use minquote.core.quoter",
    "subprocess": "check renderings with minquote.core.parser",
}

BANNED_OS_CALLS = {"system", "popen"}


def find_python_files(directory):
    """Find all .py files recursively, sorted."""
    result = []
    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if d != "__pycache__"]
        result.extend(os.path.join(root, f) for f in files if f.endswith(".py"))
    return sorted(result)


def check_source(source, filename="<source>"):
    """Return (lineno, description) for each banned construction in source."""
    errors = []
    for node in ast.walk(ast.parse(source, filename)):
        lineno = getattr(node, "lineno", 0)

        if isinstance(node, ast.Import):
            for alias in node.names:
                top = alias.name.split(".")[0]
                if top in BANNED_MODULES:
                    errors.append((lineno, f"import {alias.name}: banned, {BANNED_MODULES[top]}"))

        elif isinstance(node, ast.ImportFrom):
            top = (node.module or "").split(".")[0]
            if top in BANNED_MODULES:
                errors.append((lineno, f"from {node.module} import: banned, {BANNED_MODULES[top]}"))

        # os.system(...) / os.popen(...)
        elif (
            isinstance(node, ast.Attribute)
            and isinstance(node.value, ast.Name)
            and node.value.id == "os"
            and node.attr in BANNED_OS_CALLS
        ):
            errors.append((lineno, f"os.{node.attr}: banned, quoting never runs a shell"))

    return sorted(errors)


def check_file(filepath):
    with open(filepath) as f:
        return check_source(f.read(), filepath)


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    src_dir = args[0] if args else "src"

    if not os.path.isdir(src_dir):
        print(f"Directory not found: {src_dir}")
        return 1

    files = find_python_files(src_dir)
    if not files:
        print(f"No Python files found in: {src_dir}")
        return 1

    all_errors = []
    for filepath in files:
        try:
            all_errors.extend((filepath, lineno, desc) for lineno, desc in check_file(filepath))
        except SyntaxError as e:
            print(f"Syntax error in {filepath}: {e}")
            return 1

    if not all_errors:
        return 0

    print(f"Found {len(all_errors)} banned construction(s):")
    for filepath, lineno, description in sorted(all_errors):
        print(f"  {filepath}:{lineno}: {description}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
