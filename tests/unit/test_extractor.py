from urllib.parse import parse_qs

import httpx
import pytest

from domains.screen_ingest.errors import ExtractionError
from domains.screen_ingest.extractor import TextExtractor


def make_extractor(handler) -> TextExtractor:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return TextExtractor(api_key="ocr-key", url="https://ocr.test/parse/image", client=client)


@pytest.fixture
def image(tmp_path):
    path = tmp_path / "task.png"
    path.write_bytes(b"png-bytes")
    return path


def test_extract_returns_first_parsed_text(image):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["apikey"] = request.headers.get("apikey")
        seen["form"] = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        return httpx.Response(
            200,
            json={"ParsedResults": [{"ParsedText": "first"}, {"ParsedText": "second"}]},
        )

    text = make_extractor(handler).extract(image)

    assert text == "first"
    assert seen["apikey"] == "ocr-key"
    form = seen["form"]
    assert form["language"] == "rus"
    assert form["isOverlayRequired"] == "false"
    assert form["iscreatesearchablepdf"] == "false"
    assert form["issearchablepdfhidetextlayer"] == "false"
    assert form["base64Image"].startswith("data:image/png;base64,")


def test_empty_parsed_text_is_passed_through(image):
    extractor = make_extractor(lambda request: httpx.Response(200, json={"ParsedResults": [{"ParsedText": ""}]}))

    assert extractor.extract(image) == ""


def test_zero_results_is_an_error(image):
    extractor = make_extractor(lambda request: httpx.Response(200, json={"ParsedResults": []}))

    with pytest.raises(ExtractionError, match="No text found"):
        extractor.extract(image)


def test_service_error_message_is_reported(image):
    payload = {"IsErroredOnProcessing": True, "ErrorMessage": ["File failed validation"]}
    extractor = make_extractor(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(ExtractionError, match="File failed validation"):
        extractor.extract(image)


def test_non_2xx_is_an_error(image):
    extractor = make_extractor(lambda request: httpx.Response(403, text="forbidden"))

    with pytest.raises(ExtractionError, match="OCR request failed"):
        extractor.extract(image)


def test_timeout_is_an_error(image):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ExtractionError):
        make_extractor(handler).extract(image)


def test_invalid_json_is_an_error(image):
    extractor = make_extractor(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(ExtractionError, match="not valid JSON"):
        extractor.extract(image)


def test_unreadable_file_is_an_error(tmp_path):
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(ExtractionError, match="Cannot read"):
        make_extractor(handler).extract(tmp_path / "gone.png")
