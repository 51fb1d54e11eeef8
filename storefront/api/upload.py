# storefront/api/upload.py
# Image upload through this server, or a pre-signed URL for uploading straight to S3.
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from storefront.core.context import AppContext
from storefront.core.security import get_context, get_current_user
from storefront.schemas import PresignedRequest, UploadGrant
from storefront.services import storage

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.post("")
def upload_file(file: UploadFile | None = File(None), ctx: AppContext = Depends(get_context)):
    if file is None:
        raise HTTPException(status_code=400, detail="Please choose a file")
    # one byte past the limit is enough for save_upload to reject it
    data = file.file.read(storage.MAX_UPLOAD_BYTES + 1)
    return {"fileUrl": storage.save_upload(ctx, data, file.filename or "", file.content_type or "")}


@router.post("/presigned")
def presigned_url(body: PresignedRequest, ctx: AppContext = Depends(get_context)):
    grant = storage.request_upload_grant(ctx, body.file_name, body.file_type)
    return UploadGrant(**grant)
