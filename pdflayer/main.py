"""
FastAPI web service for PDF to editable PPTX conversion.
"""

from fastapi import FastAPI, File, UploadFile, HTTPException
from fastapi.responses import StreamingResponse, HTMLResponse, Response
from fastapi.middleware.cors import CORSMiddleware
import io
import logging
from typing import Optional
from urllib.parse import quote

from . import __version__
from .config import LOG_LEVEL, LOG_FORMAT, OCR_LANGUAGES, PPTX_MEDIA_TYPE
from .converter import convert_document, validate_pdf, get_pdf_info
from .document import load_document
from .exceptions import ConversionError, LoadFailure
from .models import ConversionConfig
from .ocr import check_tesseract_installation, get_tesseract_version
from .utils import editable_filename, parse_page_selection

SERVICE_NAME = "PDF Layer Editor"

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Converts PDF pages into slides with the page image as background and editable text boxes on top",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Check optional dependencies."""
    logger.info(f"Starting {SERVICE_NAME} service")

    if check_tesseract_installation():
        logger.info(f"Tesseract OCR is available: {get_tesseract_version()}")
    else:
        logger.warning("Tesseract OCR is not available - scanned pages will convert without text")


@app.get("/", response_class=HTMLResponse)
async def root():
    """Return service usage instructions."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <title>{SERVICE_NAME}</title>
        <style>
            body {{ font-family: Arial, sans-serif; margin: 40px; background: #f8fafc; color: #1e293b; }}
            .endpoint {{ background: white; padding: 20px; margin: 15px 0; border-radius: 8px; border-left: 4px solid #ea580c; }}
            pre {{ background: #f1f5f9; padding: 15px; border-radius: 6px; overflow-x: auto; }}
        </style>
    </head>
    <body>
        <h1>{SERVICE_NAME}</h1>
        <p>Turns each PDF page into a slide: the page image becomes the background and
        the text becomes editable text boxes placed where it appears on the page.
        Scanned pages are read with OCR.</p>

        <div class="endpoint">
            <p><strong>POST /convert</strong></p>
            <ul>
                <li><code>file</code> (required): PDF file to convert</li>
                <li><code>use_ocr</code> (optional): OCR pages without digital text (default: true)</li>
                <li><code>pages</code> (optional): page selection such as <code>1,3-5</code> (default: all)</li>
                <li><code>ocr_languages</code> (optional): Tesseract language codes (default: '{OCR_LANGUAGES}')</li>
            </ul>
        </div>
        <div class="endpoint"><p><strong>POST /info</strong> - page count, metadata and text layer per page</p></div>
        <div class="endpoint"><p><strong>GET /health</strong> - service and OCR status</p></div>

        <pre>
curl -X POST "http://localhost:8000/convert?pages=1-3" \\
     -F "file=@slides.pdf" \\
     --output "slides_Editable.pptx"
        </pre>
        <p><a href="/docs">View API Documentation</a> | <a href="/health">Check Health</a></p>
    </body>
    </html>
    """


async def _read_pdf_upload(file: UploadFile) -> bytes:
    if not file.filename or not file.filename.lower().endswith('.pdf'):
        raise HTTPException(
            status_code=400,
            detail="Please upload a PDF file"
        )

    content = await file.read()
    if len(content) == 0:
        raise HTTPException(
            status_code=400,
            detail="Empty file uploaded"
        )
    return content


@app.post("/convert")
async def convert_pdf_to_pptx(
    file: UploadFile = File(...),
    use_ocr: bool = True,
    pages: Optional[str] = None,
    ocr_languages: str = OCR_LANGUAGES
):
    """
    Convert a PDF file to an editable PPTX.

    Args:
        file: PDF file to convert
        use_ocr: OCR pages that have no digital text (default: True)
        pages: Page selection such as "1,3-5" (default: all pages)
        ocr_languages: Tesseract language codes for OCR

    Returns:
        StreamingResponse with the PPTX file, or 204 if no page was selected

    Raises:
        HTTPException: If file validation or conversion fails
    """
    logger.info(f"Processing PDF upload: {file.filename}")
    pdf_content = await _read_pdf_upload(file)
    config = ConversionConfig(use_ocr=use_ocr, ocr_languages=ocr_languages)

    try:
        document = load_document(pdf_content, name=file.filename)
    except LoadFailure as e:
        raise HTTPException(status_code=400, detail=e.message)

    try:
        try:
            selected = parse_page_selection(pages, len(document))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        pptx_content = convert_document(document, selected, config)

    except ConversionError as e:
        logger.error(f"PDF to PPTX conversion failed: {e.message}")
        raise HTTPException(
            status_code=500,
            detail=f"Conversion failed: {e.message}"
        )
    finally:
        document.close()

    if pptx_content is None:
        return Response(status_code=204)

    output_filename = editable_filename(file.filename)
    logger.info(f"Conversion completed: {output_filename} ({len(pptx_content)} bytes)")

    return StreamingResponse(
        io.BytesIO(pptx_content),
        media_type=PPTX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(output_filename)}",
            "Content-Length": str(len(pptx_content))
        }
    )


@app.post("/info")
async def get_pdf_information(file: UploadFile = File(...)):
    """
    Get information about a PDF file without converting it.

    Args:
        file: PDF file to analyze

    Returns:
        Dictionary with PDF information

    Raises:
        HTTPException: If file validation fails
    """
    pdf_content = await _read_pdf_upload(file)

    if not validate_pdf(pdf_content):
        raise HTTPException(
            status_code=400,
            detail="Invalid PDF file"
        )

    try:
        pdf_info = get_pdf_info(pdf_content)
    except Exception as e:
        logger.error(f"PDF info extraction failed: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to analyze PDF: {str(e)}"
        )

    pdf_info['file_size_bytes'] = len(pdf_content)
    pdf_info['filename'] = file.filename
    pdf_info['output_filename'] = editable_filename(file.filename)
    return pdf_info


@app.get("/health")
async def health_check():
    """
    Check service health and dependencies.

    Returns:
        Dictionary with health status
    """
    health_status = {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": __version__,
        "dependencies": {
            "tesseract_ocr": check_tesseract_installation(),
            "tesseract_version": get_tesseract_version(),
        }
    }

    if not health_status["dependencies"]["tesseract_ocr"]:
        health_status["status"] = "degraded"
        health_status["warnings"] = ["Tesseract OCR not available - OCR mode disabled"]

    return health_status


@app.exception_handler(404)
async def not_found_handler(request, exc):
    """Handle 404 errors with custom message."""
    return HTMLResponse(
        content="""
        <html>
        <body style="font-family: Arial, sans-serif; text-align: center; padding: 50px;">
            <h1>404 - Page Not Found</h1>
            <p>The requested endpoint does not exist.</p>
            <p><a href="/">Return to Home</a> | <a href="/docs">View API Documentation</a></p>
        </body>
        </html>
        """,
        status_code=404
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
