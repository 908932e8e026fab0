"""Named palette snapshots persisted to a JSON file.

The file is read once on construction and rewritten after every mutation.
Missing or unreadable data degrades to an empty list; a failed write is
logged and reported through :attr:`PaletteStore.last_error`, the in-memory
list stays authoritative for the rest of the session.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
import uuid
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from .adjust import Offsets
from .colorspace import Hex
from .errors import PaletteNotFoundError

log = logging.getLogger(__name__)


def new_palette_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class SavedPalette:
    name: str
    seed: Hex
    colors: tuple[Hex, ...]
    offsets: Offsets
    id: str = field(default_factory=new_palette_id)
    created_at: int = field(default_factory=now_ms)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["colors"] = list(self.colors)
        d["offsets"] = self.offsets.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SavedPalette":
        return cls(
            name=str(data["name"]),
            seed=str(data["seed"]),
            colors=tuple(str(c) for c in data["colors"]),
            offsets=Offsets.from_dict(data.get("offsets") or {}),
            id=str(data["id"]),
            created_at=int(data.get("created_at", 0)),
        )


class PaletteStore:
    def __init__(self, path: Union[str, os.PathLike, None] = None):
        self.path: Optional[Path] = Path(path) if path is not None else None
        self.last_error: Optional[str] = None
        self._palettes: List[SavedPalette] = self._load()

    def list(self) -> List[SavedPalette]:
        return list(self._palettes)

    def get(self, palette_id: str) -> SavedPalette:
        for p in self._palettes:
            if p.id == palette_id:
                return p
        raise PaletteNotFoundError(palette_id)

    def save(self, palette: SavedPalette) -> SavedPalette:
        if any(p.id == palette.id for p in self._palettes):
            raise ValueError(f"palette {palette.id!r} already exists")
        self._palettes.append(palette)
        self._persist()
        return palette

    def delete(self, palette_id: str) -> None:
        kept = [p for p in self._palettes if p.id != palette_id]
        if len(kept) == len(self._palettes):
            raise PaletteNotFoundError(palette_id)
        self._palettes = kept
        self._persist()

    def __len__(self) -> int:
        return len(self._palettes)

    # ---- internals ----

    def _load(self) -> List[SavedPalette]:
        if self.path is None or not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Could not read palettes from %s: %s", self.path, exc)
            self.last_error = str(exc)
            return []
        if not isinstance(raw, list):
            log.warning("Ignoring palette file %s: expected a list", self.path)
            self.last_error = f"{self.path}: expected a list of palettes"
            return []
        out: List[SavedPalette] = []
        for item in raw:
            try:
                out.append(SavedPalette.from_dict(item))
            except (KeyError, TypeError, ValueError) as exc:
                log.warning("Skipping malformed palette entry: %s", exc)
        return out

    def _persist(self) -> bool:
        if self.path is None:
            return True
        data = json.dumps([p.to_dict() for p in self._palettes], indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                os.replace(tmp, self.path)
            except OSError:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as exc:
            log.warning("Could not write palettes to %s: %s", self.path, exc)
            self.last_error = str(exc)
            return False
        self.last_error = None
        return True


__all__ = ["SavedPalette", "PaletteStore", "new_palette_id"]
