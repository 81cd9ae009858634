"""Markdown artifact persistence."""

import os
from pathlib import Path

from domains.screen_ingest.errors import PersistenceError

ARTIFACT_SUFFIX = ".md"
FILE_MODE = 0o644


class ArtifactWriter:
    """Writes generated responses to ``<output_dir>/<name>.md``."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def path_for(self, name: str) -> Path:
        return self.output_dir / f"{name}{ARTIFACT_SUFFIX}"

    def write(self, name: str, content: str) -> Path:
        """
        Create or overwrite an artifact.

        The content is written to a temporary sibling first and then renamed
        over the target, so readers never observe a half-written file.

        Args:
            name: Artifact name without extension
            content: Markdown content

        Returns:
            Path of the written artifact

        Raises:
            PersistenceError: If the output directory is missing or the write fails
        """
        if not self.output_dir.is_dir():
            raise PersistenceError(f"Output directory does not exist: {self.output_dir}")

        path = self.path_for(name)
        tmp_path = path.with_name(path.name + ".tmp")

        try:
            tmp_path.write_text(content, encoding="utf-8")
            os.chmod(tmp_path, FILE_MODE)
            tmp_path.replace(path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write {path}: {e}") from e

        return path
