"""
CSV upload API routes.
Handles HTTP endpoints for bulk-import intake and the upload history.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import PlainTextResponse
from src.core import config
from src.core.auth_dependencies import AuthenticatedUser, require_roles
from src.core.dependencies import get_import_service
from src.models.dto.upload_dto import UploadAcceptedResponse, UploadListResponse, UploadRecordResponse
from src.services.import_service import ImportService

router = APIRouter(prefix="/v1/api", tags=["Uploads"])

upload_roles = require_roles(config.settings.upload_allowed_roles)


@router.post("/uploads", response_model=UploadAcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def upload_csv(
    file: UploadFile = File(..., alias="csv", description="CSV file to import"),
    upload_type: str = Form(..., alias="type", description="items, categories, recipes or students"),
    import_service: ImportService = Depends(get_import_service),
    user: AuthenticatedUser = Depends(upload_roles)
):
    """
    Upload a CSV file for bulk import.

    The upload is registered and processed in the background; poll the
    upload history for row counts and errors.
    """
    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed"
        )

    content = await file.read()
    file_size = len(content)
    max_size_bytes = config.settings.max_file_size_mb * 1024 * 1024

    if file_size > max_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size ({file_size / (1024 * 1024):.2f}MB) exceeds maximum allowed size of {config.settings.max_file_size_mb}MB"
        )

    await file.seek(0)

    return import_service.upload_csv(file.file, file.filename, upload_type, user)


@router.get("/uploads", response_model=UploadListResponse)
async def list_uploads(
    import_service: ImportService = Depends(get_import_service),
    user: AuthenticatedUser = Depends(upload_roles)
):
    """
    Get the upload history, newest first.
    """
    return import_service.list_uploads()


@router.get("/uploads/templates/{upload_type}", response_class=PlainTextResponse)
async def download_template(
    upload_type: str,
    import_service: ImportService = Depends(get_import_service),
    user: AuthenticatedUser = Depends(upload_roles)
):
    """
    Download a CSV template with the expected columns and sample rows.
    """
    content = import_service.get_template(upload_type)
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{upload_type}_template.csv"'}
    )


@router.get("/uploads/{upload_id}", response_model=UploadRecordResponse)
async def get_upload(
    upload_id: str,
    import_service: ImportService = Depends(get_import_service),
    user: AuthenticatedUser = Depends(upload_roles)
):
    """
    Get a single upload record with its error log.
    """
    return import_service.get_upload(upload_id)
