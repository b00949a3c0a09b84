"""PDF to Excel converter: a single-page web form on top of ConversionService."""

from __future__ import annotations

from urllib.parse import quote

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import HTMLResponse, Response
from starlette.concurrency import run_in_threadpool

from .config import ConverterConfig
from .exceptions import (
    ConversionError,
    ConversionNotFoundError,
    EngineUnavailableError,
    FileTooLargeError,
    InvalidFileTypeError,
)
from .logging_config import get_logger
from .models import (
    XLSX_CONTENT_TYPE,
    ConversionOptions,
    ConvertResponse,
    Preview,
    StatusResponse,
)
from .preview import build_preview
from .service import ConversionService

logger = get_logger(__name__)


def content_disposition(file_name: str) -> str:
    """
    Attachment header for any file name.

    Header values are latin-1, so non-ASCII names go into the RFC 5987
    `filename*` parameter and `filename` carries an ASCII fallback.
    """
    fallback = file_name.encode("ascii", "ignore").decode("ascii")
    fallback = fallback.replace("\\", "").replace('"', "").strip() or "converted.xlsx"
    if fallback == file_name:
        return f'attachment; filename="{file_name}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"


def _http_error(exc: ConversionError) -> HTTPException:
    if isinstance(exc, InvalidFileTypeError):
        return HTTPException(status_code=400, detail=exc.message)
    if isinstance(exc, FileTooLargeError):
        return HTTPException(status_code=413, detail=exc.message)
    if isinstance(exc, ConversionNotFoundError):
        return HTTPException(status_code=404, detail=exc.message)
    if isinstance(exc, EngineUnavailableError):
        return HTTPException(status_code=503, detail=exc.message)
    logger.exception("Request failed")
    return HTTPException(status_code=500, detail=str(exc))


def create_app(
    config: ConverterConfig | None = None,
    service: ConversionService | None = None,
) -> FastAPI:
    service = service or ConversionService(config=config or ConverterConfig.from_env())
    app = FastAPI(
        title="PDF to Excel Converter",
        version="1.0.0",
        description="Select PDF files to convert to Excel and download",
    )
    app.state.service = service

    @app.get("/", response_class=HTMLResponse)
    def index() -> str:
        return _HTML

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/api/status", response_model=StatusResponse)
    def status() -> StatusResponse:
        return StatusResponse(**service.status())

    @app.post("/api/convert", response_model=ConvertResponse)
    async def convert(
        file: UploadFile = File(...),
        extract_tables: bool = Form(False),
        split_by_spaces: bool = Form(False),
        include_info_sheet: bool = Form(False),
    ) -> ConvertResponse:
        options = ConversionOptions(
            extract_tables=extract_tables,
            split_by_spaces=split_by_spaces,
            include_info_sheet=include_info_sheet,
            csv_delimiter=service.config.csv_delimiter,
        )
        limit = service.config.max_upload_bytes
        if file.size is not None and file.size > limit:
            raise _http_error(FileTooLargeError(file.size, limit))
        # One byte past the limit is enough for validate_upload to reject it
        data = await file.read(limit + 1)
        try:
            result = await run_in_threadpool(
                service.convert_upload,
                data,
                file_name=file.filename or "",
                content_type=file.content_type,
                options=options,
            )
        except ConversionError as exc:
            raise _http_error(exc) from exc

        return ConvertResponse(
            conversion_id=result.conversion_id,
            file_name=result.source.name,
            output_file_name=result.output_file_name,
            mode=result.mode,
            is_fallback=result.is_fallback,
            attempts=result.attempts,
            tables_found=result.tables_found,
            preview=build_preview(result.rows, service.config.preview_rows),
        )

    @app.get("/api/conversions/{conversion_id}", response_model=Preview)
    def preview(conversion_id: str) -> Preview:
        try:
            return service.preview(conversion_id)
        except ConversionError as exc:
            raise _http_error(exc) from exc

    @app.get("/api/conversions/{conversion_id}/download")
    def download(conversion_id: str) -> Response:
        try:
            data, file_name = service.export(conversion_id)
        except ConversionError as exc:
            raise _http_error(exc) from exc
        return Response(
            content=data,
            media_type=XLSX_CONTENT_TYPE,
            headers={"Content-Disposition": content_disposition(file_name)},
        )

    @app.delete("/api/conversions/{conversion_id}")
    def discard(conversion_id: str) -> dict:
        try:
            service.discard(conversion_id)
        except ConversionError as exc:
            raise _http_error(exc) from exc
        return {"status": "discarded", "conversion_id": conversion_id}

    return app


app = create_app()


_HTML = """
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <meta name="description" content="Select PDF files to convert to Excel and download" />
    <title>PDF to Excel Converter</title>
    <style>
      :root {
        --ink: #1f2937;
        --muted: #4b5563;
        --surface: #ffffff;
        --accent: #3b82f6;
        --accent-dark: #1d4ed8;
        --success: #22c55e;
        --success-dark: #15803d;
        --line: #e5e7eb;
        --stripe: #f9fafb;
        --shadow: 0 4px 6px rgba(0, 0, 0, 0.08);
      }
      * { box-sizing: border-box; }
      body {
        margin: 0;
        font-family: "Inter", "Segoe UI", sans-serif;
        color: var(--ink);
        background: #f9fafb;
        min-height: 100vh;
        padding: 32px 0;
      }
      main {
        max-width: 896px;
        margin: 0 auto;
        padding: 0 16px;
      }
      h1 {
        font-size: 30px;
        font-weight: 700;
        text-align: center;
        margin: 0 0 32px;
      }
      h2 {
        font-size: 20px;
        font-weight: 600;
        margin: 0;
      }
      h3 {
        font-size: 14px;
        font-weight: 500;
        color: var(--muted);
        margin: 0 0 8px;
      }
      .panel {
        background: var(--surface);
        border-radius: 8px;
        box-shadow: var(--shadow);
        padding: 24px;
        margin-bottom: 24px;
      }
      label.block {
        display: block;
        font-size: 14px;
        font-weight: 500;
        color: var(--muted);
        margin-bottom: 8px;
      }
      .option {
        display: flex;
        align-items: center;
        gap: 8px;
        font-size: 14px;
        margin-bottom: 8px;
      }
      .selected {
        font-size: 14px;
        color: var(--muted);
        margin: 16px 0 8px;
      }
      button {
        border: none;
        color: white;
        font-weight: 700;
        padding: 8px 16px;
        border-radius: 6px;
        cursor: pointer;
      }
      #convert-btn { background: var(--accent); }
      #convert-btn:hover { background: var(--accent-dark); }
      #download-btn { background: var(--success); }
      #download-btn:hover { background: var(--success-dark); }
      button:disabled {
        background: #9ca3af !important;
        cursor: not-allowed;
      }
      .preview-head {
        display: flex;
        justify-content: space-between;
        align-items: center;
        margin-bottom: 16px;
      }
      .table-wrap {
        overflow: auto;
        max-height: 384px;
        border: 1px solid var(--line);
        border-radius: 6px;
      }
      table {
        min-width: 100%;
        border-collapse: collapse;
      }
      td {
        padding: 12px 24px;
        white-space: nowrap;
        font-size: 14px;
        border-bottom: 1px solid var(--line);
      }
      tr:nth-child(odd) { background: var(--stripe); }
      .note {
        text-align: center;
        color: #6b7280;
        padding: 8px 0;
        margin: 0;
      }
      .mode {
        font-size: 12px;
        color: var(--muted);
        margin-top: 8px;
      }
      .hidden { display: none; }
    </style>
  </head>
  <body>
    <main>
      <h1>PDF to Excel Converter</h1>

      <section class="panel">
        <label class="block" for="pdf-input">Select PDF File</label>
        <input id="pdf-input" type="file" accept=".pdf" />

        <div style="margin-top: 16px">
          <h3>Conversion Options</h3>
          <label class="option">
            <input id="extract-tables" type="checkbox" />
            Extract table data (recommended for structured PDFs)
          </label>
          <label class="option">
            <input id="split-spaces" type="checkbox" />
            Split by multiple spaces (for space-separated columns)
          </label>
          <label class="option">
            <input id="info-sheet" type="checkbox" />
            Add a conversion info sheet to the download
          </label>
        </div>

        <div id="selected-wrap" class="hidden">
          <p class="selected" id="selected"></p>
          <button id="convert-btn" type="button" disabled>Loading PDF Library...</button>
        </div>
      </section>

      <section class="panel hidden" id="preview-panel">
        <div class="preview-head">
          <h2>Excel Preview</h2>
          <button id="download-btn" type="button">Download Excel</button>
        </div>
        <div class="table-wrap">
          <table><tbody id="preview-body"></tbody></table>
          <p class="note hidden" id="preview-note"></p>
        </div>
        <div class="mode" id="mode"></div>
      </section>
    </main>

    <script>
      const fileInput = document.getElementById("pdf-input");
      const extractTables = document.getElementById("extract-tables");
      const splitSpaces = document.getElementById("split-spaces");
      const infoSheet = document.getElementById("info-sheet");
      const selectedWrap = document.getElementById("selected-wrap");
      const selectedEl = document.getElementById("selected");
      const convertBtn = document.getElementById("convert-btn");
      const previewPanel = document.getElementById("preview-panel");
      const previewBody = document.getElementById("preview-body");
      const previewNote = document.getElementById("preview-note");
      const downloadBtn = document.getElementById("download-btn");
      const modeEl = document.getElementById("mode");

      let selectedFile = null;
      let conversion = null;
      let ready = false;
      let processing = false;

      function renderButton() {
        convertBtn.disabled = processing || !ready;
        if (processing) {
          convertBtn.textContent = "Converting...";
        } else if (!ready) {
          convertBtn.textContent = "Loading PDF Library...";
        } else {
          convertBtn.textContent = "Convert to Excel";
        }
      }

      function renderPreview(data) {
        previewBody.innerHTML = "";
        data.preview.rows.forEach((row) => {
          const tr = document.createElement("tr");
          row.forEach((cell) => {
            const td = document.createElement("td");
            td.textContent = cell;
            tr.appendChild(td);
          });
          previewBody.appendChild(tr);
        });
        if (data.preview.truncated) {
          previewNote.textContent = data.preview.message;
          previewNote.classList.remove("hidden");
        } else {
          previewNote.classList.add("hidden");
        }
        modeEl.textContent = `Mode: ${data.mode}` + (data.tables_found ? ` - tables found: ${data.tables_found}` : "");
        previewPanel.classList.remove("hidden");
      }

      async function loadStatus() {
        try {
          const res = await fetch("/api/status");
          const data = await res.json();
          ready = Boolean(data.ready);
        } catch (e) {
          ready = false;
          console.error("Failed to load PDF library status:", e);
        }
        renderButton();
        if (!ready) {
          setTimeout(loadStatus, 1000);
        }
      }

      function discardConversion() {
        if (!conversion) return;
        const id = conversion.conversion_id;
        conversion = null;
        fetch(`/api/conversions/${id}`, { method: "DELETE" }).catch((err) => {
          console.error("Discard failed:", err);
        });
      }

      fileInput.addEventListener("change", (event) => {
        const file = event.target.files && event.target.files[0];
        if (file && (file.type === "application/pdf" || file.name.toLowerCase().endsWith(".pdf"))) {
          selectedFile = file;
          discardConversion();
          previewPanel.classList.add("hidden");
          selectedEl.textContent = `Selected: ${file.name}`;
          selectedWrap.classList.remove("hidden");
        } else {
          alert("Please select a PDF file");
        }
      });

      convertBtn.addEventListener("click", async () => {
        if (!selectedFile) return;
        if (!ready) {
          alert("PDF library is still loading. Please wait a moment and try again.");
          return;
        }
        discardConversion();
        processing = true;
        renderButton();

        const form = new FormData();
        form.append("file", selectedFile);
        form.append("extract_tables", extractTables.checked);
        form.append("split_by_spaces", splitSpaces.checked);
        form.append("include_info_sheet", infoSheet.checked);

        try {
          const res = await fetch("/api/convert", { method: "POST", body: form });
          const data = await res.json();
          if (!res.ok) {
            throw new Error(data.detail || "Server error");
          }
          conversion = data;
          renderPreview(data);
        } catch (err) {
          console.error("Conversion failed:", err);
          alert("Conversion failed: " + err.message);
        } finally {
          processing = false;
          renderButton();
        }
      });

      downloadBtn.addEventListener("click", () => {
        if (!conversion) return;
        window.location.href = `/api/conversions/${conversion.conversion_id}/download`;
      });

      loadStatus();
    </script>
  </body>
</html>
"""
