
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from docvault import responses
from docvault.access import ensure_can_view, ensure_can_modify
from docvault.auth.deps import get_db, get_current_user, get_file_store, require_admin
from docvault.documents import service
from docvault.models.user import User
from docvault.schemas.document import DocumentUpdateIn
from docvault.storage.files import FileStore

router = APIRouter(prefix="/api", tags=["documents"])

@router.get("/documents")
def list_documents(db: Session = Depends(get_db), user: User = Depends(get_current_user),
                   files: FileStore = Depends(get_file_store)):
    docs = [service.to_out(d, files) for d in service.list_for_owner(db, user.id)]
    return responses.success({"documents": docs}, "Documents retrieved successfully")

@router.get("/documents/{doc_id}")
def get_document(doc_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user),
                 files: FileStore = Depends(get_file_store)):
    doc = service.get_document(db, service.parse_document_id(doc_id))
    ensure_can_view(user, doc)
    return responses.success({"document": service.to_out(doc, files)}, "Document retrieved successfully")

@router.patch("/documents/{doc_id}")
def update_document(doc_id: str, body: DocumentUpdateIn, db: Session = Depends(get_db),
                    user: User = Depends(get_current_user), files: FileStore = Depends(get_file_store)):
    doc = service.get_document(db, service.parse_document_id(doc_id))
    ensure_can_modify(user, doc)
    doc = service.update_document(db, doc, title=body.title, description=body.description,
                                  is_public=body.is_public)
    return responses.success({"document": service.to_out(doc, files)}, "Document updated successfully")

@router.delete("/documents/{doc_id}")
def delete_document(doc_id: str, db: Session = Depends(get_db), user: User = Depends(get_current_user),
                    files: FileStore = Depends(get_file_store)):
    doc = service.get_document(db, service.parse_document_id(doc_id))
    ensure_can_modify(user, doc)
    service.delete_document(db, doc, files)
    return responses.deleted("Document deleted successfully")

@router.get("/search")
def search_documents(query: str = Query("", max_length=255), db: Session = Depends(get_db),
                     user: User = Depends(get_current_user), files: FileStore = Depends(get_file_store)):
    results = [service.to_search_result(d, tag, files) for d, tag in service.search(db, user.id, query)]
    return responses.success(
        {"documents": results},
        f'Found {len(results)} document(s) matching "{query}"',
    )

@router.get("/admin/documents")
def admin_list_documents(db: Session = Depends(get_db), admin: User = Depends(require_admin),
                         files: FileStore = Depends(get_file_store)):
    docs = [service.to_out(d, files) for d in service.list_all(db)]
    return responses.success({"documents": docs, "total": len(docs)}, f"Retrieved {len(docs)} documents")
