"""
Tests for the web app endpoints.
"""

import io
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from pdf_converter import ConversionService, ConverterConfig
from pdf_converter.app import content_disposition, create_app
from pdf_converter.exceptions import EngineError
from pdf_converter.models import XLSX_CONTENT_TYPE

from conftest import FakeEngine

PDF_FILE = ("report.pdf", b"%PDF-1.4\n% fake\n", "application/pdf")


def _client(config, engine):
    return TestClient(create_app(service=ConversionService(config, engine=engine)))


@pytest.fixture
def client(config):
    lines = "\n".join(f"Item {i}  {i * 10}" for i in range(60))
    return _client(config, FakeEngine(text=lines))


class TestPages:
    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "PDF to Excel Converter" in response.text
        assert "Convert to Excel" in response.text

    def test_page_discards_previous_conversion(self, client):
        """Picking a new file releases the conversion shown before it."""
        html = client.get("/").text
        assert "discardConversion();" in html
        assert 'method: "DELETE"' in html

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_status(self, client):
        data = client.get("/api/status").json()
        assert data["ready"] is True
        assert data["modes"] == ["tables", "text", "document"]
        assert data["preview_rows"] == 50


class TestConvert:
    def test_convert_returns_preview(self, client):
        response = client.post(
            "/api/convert",
            files={"file": PDF_FILE},
            data={"split_by_spaces": "true"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["file_name"] == "report.pdf"
        assert data["output_file_name"] == "report_converted.xlsx"
        assert data["mode"] == "text"
        assert data["is_fallback"] is False
        assert data["preview"]["rows"][0] == ["Item 0", "0"]
        assert data["preview"]["total_rows"] == 60
        assert data["preview"]["truncated"] is True
        assert data["preview"]["message"] == "Showing first 50 rows of 60 total rows"

    def test_fallback_reported(self, config):
        engine = FakeEngine(
            text=EngineError("boom", mode="text"),
            document_rows=EngineError("boom", mode="document"),
        )
        response = _client(config, engine).post("/api/convert", files={"file": PDF_FILE})
        data = response.json()
        assert response.status_code == 200
        assert data["mode"] == "file_info"
        assert data["is_fallback"] is True
        assert data["preview"]["rows"][0] == ["PDF File Information"]

    def test_not_a_pdf(self, client):
        response = client.post(
            "/api/convert",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        assert response.status_code == 400
        assert "Please select a PDF file" in response.json()["detail"]

    def test_too_large(self, tmp_path):
        config = ConverterConfig(data_dir=str(tmp_path / "data"), max_upload_mb=0)
        response = _client(config, FakeEngine(text="x")).post("/api/convert", files={"file": PDF_FILE})
        assert response.status_code == 413

    def test_too_large_rejected_before_reading(self, tmp_path):
        config = ConverterConfig(data_dir=str(tmp_path / "data"), max_upload_mb=1)
        big = ("big.pdf", b"%PDF-1.4\n" + b"0" * (1024 * 1024), "application/pdf")
        response = _client(config, FakeEngine(text="x")).post("/api/convert", files={"file": big})
        assert response.status_code == 413
        assert "limit 1 MB" in response.json()["detail"]
        assert not (tmp_path / "data" / "big").exists()

    def test_engine_not_ready(self, config):
        response = _client(config, FakeEngine(enabled_modes=[])).post(
            "/api/convert", files={"file": PDF_FILE}
        )
        assert response.status_code == 503
        assert "still loading" in response.json()["detail"]


class TestConversions:
    def _convert(self, client, **form):
        response = client.post("/api/convert", files={"file": PDF_FILE}, data=form)
        return response.json()["conversion_id"]

    def test_preview(self, client):
        conversion_id = self._convert(client)
        data = client.get(f"/api/conversions/{conversion_id}").json()
        assert data["total_rows"] == 60
        assert len(data["rows"]) == 50

    def test_download(self, client):
        conversion_id = self._convert(client)
        response = client.get(f"/api/conversions/{conversion_id}/download")

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_CONTENT_TYPE
        assert 'filename="report_converted.xlsx"' in response.headers["content-disposition"]
        workbook = load_workbook(io.BytesIO(response.content))
        assert workbook.active.max_row == 60

    def test_download_with_info_sheet(self, client):
        conversion_id = self._convert(client, include_info_sheet="true")
        response = client.get(f"/api/conversions/{conversion_id}/download")
        workbook = load_workbook(io.BytesIO(response.content))
        assert workbook.sheetnames == ["PDF Content", "Conversion Info"]

    def test_discard(self, client):
        conversion_id = self._convert(client)
        response = client.delete(f"/api/conversions/{conversion_id}")
        assert response.json() == {"status": "discarded", "conversion_id": conversion_id}

        assert client.get(f"/api/conversions/{conversion_id}").status_code == 404
        assert client.delete(f"/api/conversions/{conversion_id}").status_code == 404

    def test_unknown(self, client):
        assert client.get("/api/conversions/nope/download").status_code == 404

    def test_download_non_ascii_name(self, client):
        response = client.post(
            "/api/convert",
            files={"file": ("报告.pdf", b"%PDF-1.4\n% fake\n", "application/pdf")},
        )
        conversion_id = response.json()["conversion_id"]

        response = client.get(f"/api/conversions/{conversion_id}/download")
        assert response.status_code == 200
        header = response.headers["content-disposition"]
        assert "filename*=UTF-8''" + quote("报告_converted.xlsx", safe="") in header
        assert 'filename="_converted.xlsx"' in header


class TestContentDisposition:
    def test_ascii_name(self):
        assert content_disposition("report_converted.xlsx") == (
            'attachment; filename="report_converted.xlsx"'
        )

    def test_quotes_removed_from_fallback(self):
        header = content_disposition('my "draft"_converted.xlsx')
        assert 'filename="my draft_converted.xlsx"' in header
        assert "filename*=UTF-8''my%20%22draft%22_converted.xlsx" in header
        header.encode("latin-1")

    def test_only_non_ascii(self):
        header = content_disposition("报告")
        assert 'filename="converted.xlsx"' in header
        header.encode("latin-1")
