"""
Integration tests for the FastAPI web service.
"""

from fastapi.testclient import TestClient
import io
from pptx import Presentation

import pdflayer.main as main
from pdflayer.exceptions import RecognitionFailure
from pdflayer.main import app
from conftest import make_pdf

client = TestClient(app)

PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


def upload(data, name="slides.pdf", content_type="application/pdf"):
    return {"file": (name, io.BytesIO(data), content_type)}


class TestAPIEndpoints:
    """Test FastAPI endpoints."""

    def test_root_endpoint(self):
        """Test the root endpoint returns usage instructions."""
        response = client.get("/")
        assert response.status_code == 200
        assert "PDF Layer Editor" in response.text
        assert "text/html" in response.headers["content-type"]

    def test_health_endpoint(self):
        """Test the health check endpoint."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] in ("healthy", "degraded")
        assert data["service"] == "PDF Layer Editor"
        assert "tesseract_ocr" in data["dependencies"]

    def test_convert_without_file(self):
        """Test convert endpoint without file."""
        response = client.post("/convert")
        assert response.status_code == 422

    def test_convert_with_non_pdf(self):
        """Test convert endpoint with non-PDF file."""
        response = client.post("/convert", files=upload(b"This is not a PDF", "test.txt", "text/plain"))
        assert response.status_code == 400
        assert "Please upload a PDF file" in response.json()["detail"]

    def test_convert_digital_pdf(self):
        """Test a digital PDF converts without OCR."""
        response = client.post("/convert?use_ocr=false", files=upload(make_pdf(["Hello", "World"])))

        assert response.status_code == 200
        assert response.headers["content-type"] == PPTX_MEDIA_TYPE
        assert "slides_Editable.pptx" in response.headers["content-disposition"]

        prs = Presentation(io.BytesIO(response.content))
        assert len(prs.slides) == 2

    def test_convert_selected_pages(self):
        """Test the pages parameter limits the slides."""
        response = client.post(
            "/convert?use_ocr=false&pages=2-3",
            files=upload(make_pdf(["One", "Two", "Three"]))
        )
        assert response.status_code == 200
        assert len(Presentation(io.BytesIO(response.content)).slides) == 2

    def test_convert_empty_selection(self):
        """Test a selection without pages is a no-op."""
        response = client.post("/convert?use_ocr=false&pages=,", files=upload(make_pdf(["One"])))
        assert response.status_code == 204

    def test_convert_bad_selection(self):
        """Test an out-of-range selection is rejected."""
        response = client.post("/convert?use_ocr=false&pages=9", files=upload(make_pdf(["One"])))
        assert response.status_code == 400
        assert "out of range" in response.json()["detail"]

    def test_convert_ocr_failure(self, monkeypatch):
        """Test an OCR setup failure is reported as a conversion failure."""
        def no_tesseract(langs):
            raise RecognitionFailure("OCR engine initialization failed: tesseract is not installed")

        monkeypatch.setattr(main, "convert_document", _with_recognizer_factory(no_tesseract))
        response = client.post("/convert?use_ocr=true", files=upload(make_pdf([None])))

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Conversion failed")

    def test_info(self):
        """Test the info endpoint reports per-page text layers."""
        response = client.post("/info", files=upload(make_pdf(["Text", None])))
        assert response.status_code == 200

        data = response.json()
        assert data["page_count"] == 2
        assert [page["has_digital_text"] for page in data["pages"]] == [True, False]
        assert data["output_filename"] == "slides_Editable.pptx"

    def test_info_without_file(self):
        """Test info endpoint without file."""
        response = client.post("/info")
        assert response.status_code == 422

    def test_info_with_non_pdf(self):
        """Test info endpoint with non-PDF file."""
        response = client.post("/info", files=upload(b"This is not a PDF", "test.txt", "text/plain"))
        assert response.status_code == 400
        assert "Please upload a PDF file" in response.json()["detail"]

    def test_404_endpoint(self):
        """Test non-existent endpoint."""
        response = client.get("/nonexistent")
        assert response.status_code == 404
        assert "404 - Page Not Found" in response.text


class TestAPIErrorHandling:
    """Test API error handling."""

    def test_empty_file_upload(self):
        """Test handling of empty file upload."""
        response = client.post("/convert", files=upload(b"", "empty.pdf"))
        assert response.status_code == 400
        assert "Empty file uploaded" in response.json()["detail"]

    def test_malformed_pdf(self):
        """Test handling of malformed PDF."""
        response = client.post("/convert", files=upload(b"Not a real PDF content", "malformed.pdf"))
        assert response.status_code == 400
        assert "Invalid PDF file" in response.json()["detail"]


def _with_recognizer_factory(factory):
    original = main.convert_document

    def convert(document, selected, config):
        return original(document, selected, config, recognizer_factory=factory)
    return convert
