"""CLI entry point for the Ling interpreter.

Usage:
    python -m ling [-v|-vv|-vvv|-vvvv] <script>
    python -m ling [-v...] --emit-ast <script>
    python -m ling [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given script and emit an AST JSON file
  --ast         Resolve and execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Printed output goes to stdout, diagnostics
to stderr. The exit status is 1 if any compile-time or runtime error
occurred and 0 otherwise.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .errors import Diagnostics
from .interpreter import Interpreter
from .parser import parse_program


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='ling', description="Ling language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='SCRIPT', help='emit AST JSON for the given script')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('script', nargs='?', help='Ling script to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        script = Path(args.emit_ast)
        source = read_source(script)
        diagnostics = Diagnostics()
        program = parse_program(source, diagnostics)
        if diagnostics.had_error:
            sys.exit(1)
        out_path = script.with_name(script.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        program = ast_from_obj(data)
        interpreter = Interpreter(debug_level=args.v)
        if not interpreter.run(program):
            sys.exit(1)
        return

    # Default: execute a script
    if not args.script:
        parser.error('missing script; or use --emit-ast/--ast')
    source = read_source(Path(args.script))
    interpreter = Interpreter(debug_level=args.v)
    if not interpreter.run_source(source):
        sys.exit(1)


if __name__ == '__main__':
    main()
