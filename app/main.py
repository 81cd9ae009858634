"""
Screen Scribe - Main Entry Point

Watches a screenshot directory and, for every new image:
- Extracts text with OCR.space
- Sends the text to Gemini with a fixed instruction
- Saves the answer as a Markdown file

Already-processed file names are remembered in memory only. Restarting the
process reprocesses every matching image still in the input directory.
"""

import argparse
import signal
import sys
import threading
from typing import Optional

from loguru import logger

from app.utils.config import LOG_LEVELS, Settings, load_settings
from app.utils.helpers import safe_path
from domains.screen_ingest.errors import DirectoryListingError, StartupConfigError
from domains.screen_ingest.extractor import TextExtractor
from domains.screen_ingest.gate import FileGate
from domains.screen_ingest.generator import ResponseGenerator
from domains.screen_ingest.pipeline import Pipeline, constant_name, source_name
from domains.screen_ingest.watchers.notifier import ChangeNotifier
from domains.screen_ingest.watchers.poller import IngestionLoop
from domains.screen_ingest.writer import ArtifactWriter

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"


def configure_logging(level: str = "INFO"):
    """Replace the default loguru sink with the application format."""
    logger.remove()
    # diagnose would print local values, API keys included, into tracebacks
    logger.add(sys.stdout, format=LOG_FORMAT, level=level, diagnose=False)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Watch a directory for screenshots, OCR them, and save Gemini answers as Markdown.",
    )
    parser.add_argument("--input-dir", default=None, help="Directory to watch (overrides INPUT_DIR).")
    parser.add_argument("--output-dir", default=None, help="Directory for Markdown output (overrides OUTPUT_DIR).")
    parser.add_argument("--log-level", default=None, help=f"Log level, one of {', '.join(LOG_LEVELS)} (overrides LOG_LEVEL).")
    parser.add_argument("--once", action="store_true", help="Run a single scan cycle and exit.")
    return parser.parse_args(argv)


def prepare_directories(settings: Settings):
    """
    Create the output directory and check the input directory.

    Raises:
        StartupConfigError: If the input directory is missing or the output
            directory cannot be created
    """
    if not settings.input_dir.is_dir():
        raise StartupConfigError(f"Input directory does not exist: {settings.input_dir}")

    try:
        settings.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StartupConfigError(f"Cannot create output directory {settings.output_dir}: {e}") from e


def build_pipeline(settings: Settings) -> Pipeline:
    """Wire the OCR client, generator and writer from settings."""
    if settings.artifact_naming == "source":
        namer = source_name
    else:
        namer = constant_name(settings.artifact_name)

    return Pipeline(
        extractor=TextExtractor.from_settings(settings),
        generator=ResponseGenerator.from_settings(settings),
        writer=ArtifactWriter(settings.output_dir),
        artifact_namer=namer,
    )


def build_loop(settings: Settings, pipeline: Pipeline, notifier=None) -> IngestionLoop:
    interval = settings.events_fallback_interval if notifier is not None else settings.poll_interval
    return IngestionLoop(
        input_dir=settings.input_dir,
        gate=FileGate(),
        process=pipeline.run,
        poll_interval=interval,
        case_sensitive=settings.suffix_case_sensitive,
        notifier=notifier,
    )


def run(settings: Settings, once: bool = False) -> int:
    """
    Run the ingestion loop until stopped.

    Returns:
        Process exit code
    """
    prepare_directories(settings)
    pipeline = build_pipeline(settings)

    notifier = None
    if settings.watch_mode == "events" and not once:
        notifier = ChangeNotifier(settings.input_dir)

    loop = build_loop(settings, pipeline, notifier)

    def _signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, shutting down.")
        loop.stop()

    previous_handlers = {}
    if threading.current_thread() is threading.main_thread():
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous_handlers[signum] = signal.signal(signum, _signal_handler)

    logger.info(f"Output directory: {settings.output_dir}")
    logger.info("Processed file names are kept in memory only; a restart reprocesses the input directory")

    try:
        if once:
            loop.scan_once()
        else:
            if notifier is not None:
                notifier.start()
            loop.run()
    finally:
        if notifier is not None and notifier.observer.is_alive():
            notifier.stop()
        pipeline.extractor.close()
        pipeline.generator.close()
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    # Level is validated with the rest of the settings
    configure_logging("INFO")
    logger.info("Screen Scribe - Screenshot Watcher")

    try:
        settings = load_settings(
            input_dir=safe_path(args.input_dir) if args.input_dir else None,
            output_dir=safe_path(args.output_dir) if args.output_dir else None,
            log_level=args.log_level,
        )
        configure_logging(settings.log_level)
        return run(settings, once=args.once)

    except StartupConfigError as e:
        logger.critical(f"Startup failed: {e}")
        return 1
    except DirectoryListingError as e:
        logger.critical(f"Stopping: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Screen Scribe stopped by user")
        return 130


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(main())
