
import logging

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from docvault.models.document import Document
from docvault.schemas.document import DocumentOut, SearchResultOut
from docvault.storage.files import FileStore

logger = logging.getLogger(__name__)

TITLE_MATCH = "Title match"
DESCRIPTION_MATCH = "Description match"
CONTENT_MATCH = "Content match (OCR)"


MAX_ID = 2**63 - 1


def parse_document_id(raw: str) -> int:
    if not (raw.isascii() and raw.isdigit()) or int(raw) > MAX_ID:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid document ID format")
    return int(raw)

def to_out(doc: Document, files: FileStore) -> DocumentOut:
    out = DocumentOut.model_validate(doc)
    out.file_url = files.public_url(doc.file_path)
    return out

def create_document(db: Session, *, user_id: int, title: str, description: str | None,
                    file_path: str, file_type: str, file_size: int,
                    ocr_text: str | None, is_public: bool = False) -> Document:
    doc = Document(
        user_id=user_id,
        title=title,
        description=description,
        file_path=file_path,
        file_type=file_type,
        file_size=file_size,
        ocr_text=ocr_text,
        is_public=is_public,
    )
    db.add(doc)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(doc)
    return doc

def get_document(db: Session, doc_id: int) -> Document:
    doc = db.get(Document, doc_id)
    if doc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return doc

def list_for_owner(db: Session, user_id: int) -> list[Document]:
    return (
        db.query(Document)
        .filter(Document.user_id == user_id)
        .order_by(Document.created_at.desc(), Document.id.desc())
        .all()
    )

def list_all(db: Session) -> list[Document]:
    return db.query(Document).order_by(Document.created_at.desc(), Document.id.desc()).all()

def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"

def relevance(doc: Document, query: str) -> str:
    q = query.lower()
    if q in doc.title.lower():
        return TITLE_MATCH
    if doc.description and q in doc.description.lower():
        return DESCRIPTION_MATCH
    if doc.ocr_text and q in doc.ocr_text.lower():
        return CONTENT_MATCH
    return "Unknown match"

def search(db: Session, user_id: int, query: str) -> list[tuple[Document, str]]:
    """Documents the user may see whose title, description or text contains ``query``."""
    pattern = _like_pattern(query)
    docs = (
        db.query(Document)
        .filter(
            or_(Document.user_id == user_id, Document.is_public.is_(True)),
            or_(
                Document.title.ilike(pattern, escape="\\"),
                Document.description.ilike(pattern, escape="\\"),
                Document.ocr_text.ilike(pattern, escape="\\"),
            ),
        )
        .order_by(Document.created_at.desc(), Document.id.desc())
        .all()
    )
    return [(doc, relevance(doc, query)) for doc in docs]

def to_search_result(doc: Document, tag: str, files: FileStore) -> SearchResultOut:
    base = to_out(doc, files)
    return SearchResultOut(**base.model_dump(), relevance=tag)

def update_document(db: Session, doc: Document, *, title: str | None = None,
                    description: str | None = None, is_public: bool | None = None) -> Document:
    if title is not None:
        doc.title = title
    if description is not None:
        doc.description = description
    if is_public is not None:
        doc.is_public = is_public
    db.commit()
    db.refresh(doc)
    return doc

def delete_document(db: Session, doc: Document, files: FileStore) -> bool:
    """Remove the row, then the backing file. Returns whether a file was removed."""
    stored_name = doc.file_path
    db.delete(doc)
    db.commit()
    try:
        removed = files.delete(stored_name)
    except OSError:
        logger.warning("could not delete stored file %s", stored_name, exc_info=True)
        return False
    if not removed:
        logger.info("stored file %s was already gone", stored_name)
    return removed
