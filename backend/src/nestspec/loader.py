"""Discovery and loading of spec files."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from nestspec.dsl import SpecSession
from nestspec.errors import DeclarationError
from nestspec.observability import get_logger

logger = get_logger("nestspec.loader")


def discover_spec_files(paths: Iterable[str], pattern: str = "*_spec.py") -> List[Path]:
    """Expand files and directories into an ordered, de-duplicated file list."""
    found: List[Path] = []
    seen = set()
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            candidates = sorted(path.rglob(pattern))
        elif path.is_file():
            candidates = [path]
        else:
            raise FileNotFoundError(f"no such spec file or directory: {raw}")
        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved not in seen:
                seen.add(resolved)
                found.append(candidate)
    return found


def load_spec_file(path: Path, session: SpecSession, namespace: Optional[Dict[str, Any]] = None) -> None:
    """
    Execute ``path`` as a module with ``session`` collecting its describes.

    ``namespace`` entries are predefined as module globals before the file runs.
    """
    module_name = f"nestspec_spec_{path.stem}_{abs(hash(str(path.resolve())))}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise DeclarationError(f"cannot load spec file {path}")

    module = importlib.util.module_from_spec(spec)
    if namespace:
        vars(module).update(namespace)
    sys.modules[module_name] = module
    logger.debug("spec.file.loading", path=str(path))
    try:
        with session.activate():
            spec.loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)
