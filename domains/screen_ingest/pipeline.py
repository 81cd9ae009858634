"""
Per-file processing: extract text, generate a response, persist the artifact.

Failures are contained here. Whatever happens to one file, the caller gets an
outcome record back and moves on to the next.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from app.utils.helpers import sanitize_filename
from domains.screen_ingest.errors import FileProcessingError
from domains.screen_ingest.extractor import TextExtractor
from domains.screen_ingest.generator import ResponseGenerator
from domains.screen_ingest.writer import ArtifactWriter

STAGE_EXTRACT = "extract"
STAGE_GENERATE = "generate"
STAGE_PERSIST = "persist"


@dataclass
class PipelineOutcome:
    """Result of one pipeline run, used for logging and inspection."""

    identity: str
    stage: str
    ok: bool
    artifact_path: Optional[Path] = None
    error: Optional[str] = None


def constant_name(name: str) -> Callable[[Path], str]:
    """Artifact namer that always returns ``name``."""
    return lambda image_path: name


def source_name(image_path: Path) -> str:
    """Artifact namer that derives the name from the image file stem."""
    return sanitize_filename(Path(image_path).stem) or "result"


class Pipeline:
    """Runs the extract, generate, persist sequence for a single image."""

    def __init__(
        self,
        extractor: TextExtractor,
        generator: ResponseGenerator,
        writer: ArtifactWriter,
        artifact_namer: Callable[[Path], str] = constant_name("result"),
    ):
        self.extractor = extractor
        self.generator = generator
        self.writer = writer
        self.artifact_namer = artifact_namer

    def _fail(self, identity: str, stage: str, e: Exception) -> PipelineOutcome:
        if isinstance(e, FileProcessingError):
            logger.error(f"{stage} failed for {identity}: {e}")
        else:
            logger.opt(exception=e).error(f"Unexpected {stage} error for {identity}: {e}")
        return PipelineOutcome(identity=identity, stage=stage, ok=False, error=str(e))

    def run(self, image_path: Path) -> PipelineOutcome:
        """
        Process a single image.

        Never raises: stage errors are logged and reported in the outcome.

        Args:
            image_path: Path of the image to process

        Returns:
            Outcome naming the last stage reached
        """
        image_path = Path(image_path)
        identity = image_path.name
        logger.info(f"Processing file: {image_path}")

        try:
            text = self.extractor.extract(image_path)
        except Exception as e:
            return self._fail(identity, STAGE_EXTRACT, e)

        try:
            response = self.generator.generate(self.generator.build_prompt(text))
        except Exception as e:
            return self._fail(identity, STAGE_GENERATE, e)

        try:
            name = self.artifact_namer(image_path)
            artifact_path = self.writer.write(name, response)
        except Exception as e:
            return self._fail(identity, STAGE_PERSIST, e)

        logger.success(f"File saved: {artifact_path}")
        return PipelineOutcome(identity=identity, stage=STAGE_PERSIST, ok=True, artifact_path=artifact_path)
