"""
Screenshot Ingestion Domain

Watches an input directory for new screenshots and turns each into a
Markdown answer:
- extractor.py - OCR.space text extraction
- generator.py - Gemini response generation
- writer.py - Markdown artifact persistence
- pipeline.py - Per-file extract/generate/persist sequence
- watchers/ - Directory scan loop and change notification
"""

__all__ = ["codec", "errors", "extractor", "gate", "generator", "pipeline", "watchers", "writer"]
