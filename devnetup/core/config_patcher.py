"""Config patcher — redirects CometBFT indexing to an external store.

The generated node ``config.toml`` carries a single ``indexer = "kv"``
line in its ``[tx_index]`` table. The patch replaces that line with the
Postgres indexer and injects the connection string directly after it.

Insert-or-replace: connection-string lines already present in the same
table are dropped first, so re-patching a file (or patching a generator
output that ships an empty ``psql-conn = ""``) never duplicates the key.
Every other line is left untouched.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path

from devnetup.core.errors import PatchError
from devnetup.models.network import IndexerPatch, NetworkState

logger = logging.getLogger(__name__)

_TABLE_HEADER = re.compile(r"^\s*\[")


def _key_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*{re.escape(key)}\s*=")


class ConfigPatcher:
    """Applies an :class:`IndexerPatch` to node config files.

    Parameters
    ----------
    patch:
        Key names and indexer kind to write. The connection string given
        to ``patch_indexer`` overrides ``patch.connection_string``.
    """

    def __init__(self, patch: IndexerPatch | None = None) -> None:
        self._patch = patch or IndexerPatch()

    def patch_indexer(self, config_path: Path, connection_string: str) -> bool:
        """Rewrite the indexer line of *config_path*.

        Returns ``True`` if the file content changed.

        Raises
        ------
        PatchError
            If the file is missing, or the indexer key matches zero or
            more than one line.
        """
        patch = self._patch.model_copy(update={"connection_string": connection_string})
        try:
            original = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PatchError(f"cannot read {config_path}: {exc}") from exc

        lines = original.splitlines(keepends=True)
        patched = self._apply(lines, patch, config_path)
        content = "".join(patched)
        if content == original:
            logger.debug("%s already points indexing at %s", config_path, patch.indexer_kind)
            return False

        _atomic_write(config_path, content)
        logger.info("Patched indexer in %s -> %s", config_path, patch.indexer_kind)
        return True

    def patch_state(self, state: NetworkState, connection_string: str) -> list[Path]:
        """Patch every node config of *state*; returns the patched paths."""
        if not state.node_config_paths:
            raise PatchError(f"no node configs to patch under {state.state_dir}")
        for config_path in state.node_config_paths:
            self.patch_indexer(config_path, connection_string)
        return list(state.node_config_paths)

    # ------------------------------------------------------------------
    # Line surgery
    # ------------------------------------------------------------------

    @staticmethod
    def _apply(lines: list[str], patch: IndexerPatch, config_path: Path) -> list[str]:
        indexer_re = _key_pattern(patch.indexer_key)
        conn_re = _key_pattern(patch.connection_key)

        matches = [i for i, line in enumerate(lines) if indexer_re.match(line)]
        if not matches:
            raise PatchError(
                f"no line with key {patch.indexer_key!r} found in {config_path}"
            )
        if len(matches) > 1:
            raise PatchError(
                f"key {patch.indexer_key!r} matches {len(matches)} lines in "
                f"{config_path} (lines {', '.join(str(i + 1) for i in matches)})"
            )
        target = matches[0]

        # Bounds of the TOML table holding the indexer line.
        start = 0
        for i in range(target - 1, -1, -1):
            if _TABLE_HEADER.match(lines[i]):
                start = i + 1
                break
        end = len(lines)
        for i in range(target + 1, len(lines)):
            if _TABLE_HEADER.match(lines[i]):
                end = i
                break

        old = lines[target]
        body = old.rstrip("\r\n")
        ending = old[len(body):]
        indent = body[: len(body) - len(body.lstrip())]
        newline = ending or "\n"

        replacement = [
            f"{indent}{patch.indexer_line()}{newline}",
            f"{indent}{patch.connection_line()}{newline}",
        ]

        result: list[str] = []
        for i, line in enumerate(lines):
            if i == target:
                result.extend(replacement)
            elif start <= i < end and conn_re.match(line):
                continue
            else:
                result.append(line)

        # Keep a missing trailing newline missing.
        if not lines[-1].endswith(("\n", "\r")):
            result[-1] = result[-1].rstrip("\r\n")
        return result


def _atomic_write(path: Path, content: str) -> None:
    """Replace *path* with *content* without exposing a half-written file."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
