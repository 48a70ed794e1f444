import logging

from fastapi import APIRouter, UploadFile, File, Form, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from docvault import responses
from docvault.auth.deps import get_db, get_current_user, get_file_store, get_extractor
from docvault.documents import service
from docvault.extraction import TextExtractor
from docvault.models.user import User
from docvault.schemas.document import DocumentUploadIn
from docvault.storage.files import FileStore, FileTooLarge
from docvault.validation import validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])

DEFAULT_TYPE = "application/octet-stream"

@router.post("/upload", status_code=201)
def upload_document(
    file: UploadFile | str | None = File(None),
    title: str | None = Form(None),
    description: str | None = Form(None),
    is_public: str | None = Form(None, alias="isPublic"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    files: FileStore = Depends(get_file_store),
    extractor: TextExtractor = Depends(get_extractor),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded. Please select a file to upload.")
    if isinstance(file, str) or not file.filename:
        raise HTTPException(status_code=400, detail="File must have a filename")

    fields = {"title": title, "description": description, "isPublic": is_public}
    meta = validate(DocumentUploadIn, {k: v for k, v in fields.items() if v is not None})

    try:
        stored = files.save(file.file, file.filename)
    except FileTooLarge as e:
        raise HTTPException(status_code=413, detail=f"File is larger than the {e.limit} byte limit")
    except OSError:
        logger.exception("failed to store upload %r for user %s", file.filename, user.id)
        raise HTTPException(status_code=500, detail="Failed to save uploaded file")

    ocr_text = extractor.extract(stored.path, file.content_type)

    try:
        doc = service.create_document(
            db,
            user_id=user.id,
            title=meta.title,
            description=meta.description,
            file_path=stored.stored_name,
            file_type=file.content_type or DEFAULT_TYPE,
            file_size=stored.byte_size,
            ocr_text=ocr_text,
            is_public=meta.is_public,
        )
    except SQLAlchemyError:
        logger.exception("failed to record upload %s", stored.stored_name)
        files.delete(stored.stored_name)
        raise HTTPException(status_code=500, detail="Failed to save document metadata")

    logger.info("user %s uploaded document %s (%s, %d bytes)", user.id, doc.id, doc.file_path, doc.file_size)
    return responses.created({"document": service.to_out(doc, files)}, "Document uploaded successfully")
