"""Documents Router - source PDF streaming with byte-range support"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import StreamingResponse

from api.services.document_service import (
    PDF_MEDIA_TYPE,
    DocumentNotFoundError,
    DocumentService,
    RangeNotSatisfiableError,
    get_document_service,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/documents", tags=["Documents"])


@router.get("/raw-pdf")
def raw_pdf(
    range_header: Optional[str] = Header(None, alias="Range"),
    service: DocumentService = Depends(get_document_service),
):
    """Stream the repair catalog PDF; honours a single ``Range: bytes=`` request"""
    try:
        byte_range = service.resolve_range(range_header)
    except DocumentNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "code": "FILE_NOT_FOUND",
                "message": "File not found or unreadable",
                "hint": "Check REPAIR_PDF_PATH",
            },
        )
    except RangeNotSatisfiableError as e:
        raise HTTPException(
            status_code=status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE,
            detail={
                "code": "RANGE_NOT_SATISFIABLE",
                "message": str(e),
                "hint": f"Valid byte offsets are 0-{max(e.size - 1, 0)}",
            },
            headers={"Content-Range": f"bytes */{e.size}"},
        )

    if byte_range is None:
        size = service.file_size()
        return StreamingResponse(
            service.iter_bytes(),
            media_type=PDF_MEDIA_TYPE,
            headers={"Content-Length": str(size), "Accept-Ranges": "bytes"},
        )

    logger.info(f"PDF range request: {byte_range.content_range}")
    return StreamingResponse(
        service.iter_bytes(byte_range.start, byte_range.end),
        status_code=status.HTTP_206_PARTIAL_CONTENT,
        media_type=PDF_MEDIA_TYPE,
        headers={
            "Content-Range": byte_range.content_range,
            "Accept-Ranges": "bytes",
            "Content-Length": str(byte_range.length),
        },
    )
