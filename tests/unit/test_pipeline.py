from pathlib import Path

import pytest

from domains.screen_ingest.errors import ExtractionError, GenerationError, PersistenceError
from domains.screen_ingest.pipeline import Pipeline, constant_name, source_name
from domains.screen_ingest.writer import ArtifactWriter


class FakeExtractor:
    def __init__(self, texts=None, fail_for=()):
        self.texts = texts or {}
        self.fail_for = set(fail_for)
        self.calls = []

    def extract(self, image_path: Path) -> str:
        self.calls.append(image_path.name)
        if image_path.name in self.fail_for:
            raise ExtractionError("No text found in image")
        return self.texts.get(image_path.name, f"text of {image_path.name}")


class FakeGenerator:
    def __init__(self, fail=False):
        self.fail = fail
        self.prompts = []

    def build_prompt(self, text: str) -> str:
        return "Q:\n" + text

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise GenerationError("No response from Gemini API")
        return "answer to " + prompt


class RecordingWriter:
    def __init__(self, fail=False):
        self.fail = fail
        self.writes = []

    def write(self, name, content):
        if self.fail:
            raise PersistenceError("disk full")
        self.writes.append((name, content))
        return Path("/out") / f"{name}.md"


def test_successful_run_writes_generated_response(tmp_path):
    extractor = FakeExtractor(texts={"a.png": "2+2"})
    generator = FakeGenerator()
    pipeline = Pipeline(extractor, generator, ArtifactWriter(tmp_path))

    outcome = pipeline.run(tmp_path / "a.png")

    assert outcome.ok
    assert outcome.identity == "a.png"
    assert outcome.artifact_path == tmp_path / "result.md"
    assert generator.prompts == ["Q:\n2+2"]
    assert (tmp_path / "result.md").read_text(encoding="utf-8") == "answer to Q:\n2+2"


def test_extraction_failure_skips_generation_and_persistence(tmp_path):
    extractor = FakeExtractor(fail_for={"c.jpg"})
    generator = FakeGenerator()
    writer = RecordingWriter()
    pipeline = Pipeline(extractor, generator, writer)

    outcome = pipeline.run(tmp_path / "c.jpg")

    assert not outcome.ok
    assert outcome.stage == "extract"
    assert "No text found" in outcome.error
    assert generator.prompts == []
    assert writer.writes == []


def test_generation_failure_skips_persistence(tmp_path):
    writer = RecordingWriter()
    pipeline = Pipeline(FakeExtractor(), FakeGenerator(fail=True), writer)

    outcome = pipeline.run(tmp_path / "a.png")

    assert not outcome.ok
    assert outcome.stage == "generate"
    assert writer.writes == []


def test_persistence_failure_is_contained(tmp_path):
    pipeline = Pipeline(FakeExtractor(), FakeGenerator(), RecordingWriter(fail=True))

    outcome = pipeline.run(tmp_path / "a.png")

    assert not outcome.ok
    assert outcome.stage == "persist"
    assert outcome.error == "disk full"


def test_unexpected_exception_does_not_escape(tmp_path):
    class BrokenExtractor:
        def extract(self, image_path):
            raise KeyError("surprise")

    pipeline = Pipeline(BrokenExtractor(), FakeGenerator(), RecordingWriter())

    outcome = pipeline.run(tmp_path / "a.png")

    assert not outcome.ok
    assert outcome.stage == "extract"


def test_two_runs_overwrite_single_artifact(tmp_path):
    extractor = FakeExtractor(texts={"one.png": "first", "two.png": "second"})
    pipeline = Pipeline(extractor, FakeGenerator(), ArtifactWriter(tmp_path))

    pipeline.run(tmp_path / "one.png")
    pipeline.run(tmp_path / "two.png")

    assert (tmp_path / "result.md").read_text(encoding="utf-8") == "answer to Q:\nsecond"
    assert [p.name for p in tmp_path.iterdir()] == ["result.md"]


def test_source_naming_keeps_one_artifact_per_image(tmp_path):
    pipeline = Pipeline(FakeExtractor(), FakeGenerator(), ArtifactWriter(tmp_path), artifact_namer=source_name)

    pipeline.run(tmp_path / "one.png")
    pipeline.run(tmp_path / "two.jpeg")

    assert sorted(p.name for p in tmp_path.iterdir()) == ["one.md", "two.md"]


@pytest.mark.parametrize(
    "image, expected",
    [
        (Path("Screenshot 2024-01-01 at 10.00.00.png"), "Screenshot 2024-01-01 at 10.00.00"),
        (Path("what?.jpg"), "what_"),
        (Path("..png"), "result"),
    ],
)
def test_source_name(image, expected):
    assert source_name(image) == expected


def test_constant_name_ignores_source():
    namer = constant_name("result")

    assert namer(Path("a.png")) == "result"
    assert namer(Path("b.jpg")) == "result"
