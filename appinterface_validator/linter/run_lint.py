#!/usr/bin/env python3
# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CLI entry point for validating AppInterface YAML files."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..config import validator_config
from . import lint_files, LintResult


def find_yaml_files(paths: List[str], extensions: Sequence[str] = validator_config.document_extensions) -> List[Path]:
    """Collect YAML documents from files and directory trees."""
    found = set()

    for path in map(Path, paths):
        if path.is_dir():
            found.update(p for ext in extensions for p in path.rglob(f'*{ext}'))
        elif path.is_file() and path.suffix in extensions:
            found.add(path)
        elif path.is_file():
            print(f"Warning: Not a YAML document: {path}", file=sys.stderr)
        else:
            print(f"Warning: Path does not exist: {path}", file=sys.stderr)

    return sorted(found)


def _summary(results: List[LintResult]) -> Dict[str, Any]:
    return {
        'files': len(results),
        'errors': sum(len(r.errors) for r in results),
        'warnings': sum(len(r.warnings) for r in results),
        'results': [r.to_dict() for r in results],
    }


def _annotations(result: LintResult) -> Iterator[str]:
    for level, entries in (('error', result.errors), ('warning', result.warnings)):
        for entry in entries:
            yield f"::{level} file={result.file_path},line={entry.get('line', 1)}::{entry['message']}"


def _human(result: LintResult) -> Iterator[str]:
    if not (result.errors or result.warnings):
        return
    yield f"\n{result.file_path}:"
    for label, entries in (('ERROR', result.errors), ('WARNING', result.warnings)):
        for entry in entries:
            where = f":{entry['line']}" if 'line' in entry else ""
            yield f"  {label}{where}: {entry['message']}"


def format_results(results: List[LintResult], output_format: str) -> List[str]:
    """Render lint results as output lines."""
    if output_format == 'json':
        return [json.dumps(_summary(results), indent=2)]
    render = _annotations if output_format == 'github-actions' else _human
    return [line for result in results for line in render(result)]


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the linter CLI."""
    parser = argparse.ArgumentParser(
        description='Validate AppInterface YAML files against workspace schemas',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='*',
        default=None,
        help='File paths or directories to lint (default: the workspace)',
    )
    parser.add_argument(
        '--workspace',
        default='.',
        help='Workspace root containing the schemas directory (default: current directory)',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )

    args = parser.parse_args(argv)
    if args.format != 'human':
        # machine readable reports own stdout
        validator_config.log_level = 'WARNING'
    validator_config.set_logging()

    if not args.paths:
        args.paths = [args.workspace]

    yaml_files = find_yaml_files(args.paths)
    # schema sources are not documents
    schema_dir = (Path(args.workspace) / validator_config.schema_dir_name).resolve()
    yaml_files = [f for f in yaml_files if schema_dir not in f.resolve().parents]

    if not yaml_files:
        print("No YAML documents found.", file=sys.stderr)
        sys.exit(1)

    results = lint_files(Path(args.workspace), yaml_files)

    for line in format_results(results, args.format):
        print(line)

    if any(not r.ok for r in results):
        sys.exit(1)
    if args.format == 'human':
        print(f"Validated {len(results)} documents with no errors.")
    sys.exit(0)


if __name__ == '__main__':
    main()
