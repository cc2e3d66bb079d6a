#!/usr/bin/env python3
"""
Script to format the mdpreview sources using black.

Usage:
    python scripts/format_python.py          # reformat in place
    python scripts/format_python.py --check  # only report files black would change
"""

import argparse
import subprocess
import sys
from pathlib import Path

SOURCE_ROOTS = ["lib", "internal", "scripts", "main.py", "test_main.py"]
SKIPPED_PARTS = {"venv", ".venv", "build", "__pycache__"}


def find_python_files(project_root: Path) -> list[Path]:
    """Find Python files under the source roots, skipping virtualenvs and build output."""
    python_files = []
    for name in SOURCE_ROOTS:
        path = project_root / name
        if path.is_file():
            python_files.append(path)
            continue
        for file_path in path.rglob("*.py"):
            if SKIPPED_PARTS.intersection(file_path.parts):
                continue
            python_files.append(file_path)
    return sorted(python_files)


def run_black(file_paths: list[Path], project_root: Path, check: bool) -> bool:
    """Run black with the project configuration from pyproject.toml."""
    if not file_paths:
        print("No Python files found to format.")
        return True

    cmd = ["black", "--config", str(project_root / "pyproject.toml")]
    if check:
        cmd.append("--check")
    cmd.extend(str(f) for f in file_paths)

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        print("Error: black not found. Please install it using 'pip install -e .[dev]'.")
        return False

    if result.returncode == 0:
        print(f"{'Checked' if check else 'Formatted'} {len(file_paths)} file(s).")
        return True

    print("black reported problems:")
    print(result.stderr)
    return False


def main() -> int:
    parser = argparse.ArgumentParser(description="Format mdpreview sources with black")
    parser.add_argument("--check", action="store_true", help="Don't write files, just report")
    args = parser.parse_args()

    # Project root is one level up from the scripts directory
    project_root = Path(__file__).parent.parent
    python_files = find_python_files(project_root)
    print(f"Found {len(python_files)} Python file(s) in {project_root}.")

    return 0 if run_black(python_files, project_root, args.check) else 1


if __name__ == "__main__":
    sys.exit(main())
