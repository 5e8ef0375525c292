"""Utility functions for the command line front-end."""
from pathlib import Path

import click
from rich.console import Console

from syllabus_server.pdf_utils import TEXT_SUFFIXES, load_syllabus_text

console = Console()
error_console = Console(stderr=True)

SYLLABUS_SUFFIXES = TEXT_SUFFIXES + (".pdf",)
STDIN = "-"


def expand_syllabus_paths(paths: tuple[str, ...]) -> list[str]:
    """Expand paths to include all syllabus files in directories.
    
    Args:
        paths: Tuple of file paths, directory paths and/or "-" for stdin
        
    Returns:
        List of syllabus sources with directories expanded
        
    Raises:
        SystemExit: If a path is missing or a directory holds no syllabus files
    """
    sources: list[str] = []
    
    for path_str in paths:
        if path_str == STDIN:
            sources.append(STDIN)
            continue

        path = Path(path_str)
        
        if path.is_file():
            # It's a file, add it directly
            sources.append(path_str)
        elif path.is_dir():
            # It's a directory, find all text and PDF syllabi
            found = sorted(
                p for p in path.iterdir()
                if p.is_file() and p.suffix.lower() in SYLLABUS_SUFFIXES
            )
            
            if not found:
                error_console.print(
                    f"[red]Error:[/red] Directory '{path_str}' contains no .txt or .pdf files."
                )
                raise SystemExit(1)
            
            sources.extend(str(p) for p in found)
        else:
            error_console.print(f"[red]Error:[/red] Path '{path_str}' does not exist.")
            raise SystemExit(1)
    
    return sources


def read_source(source: str) -> str:
    """Read syllabus text from a file, PDF or stdin."""
    if source == STDIN:
        return click.get_text_stream("stdin").read()
    return load_syllabus_text(source)
