from fastapi import HTTPException, status

from docvault.models.document import Document


def can_view(requester, document: Document) -> bool:
    """Owners and admins see everything; everyone else only public documents."""
    return document.user_id == requester.id or bool(document.is_public) or requester.is_admin


def can_modify(requester, document: Document) -> bool:
    return document.user_id == requester.id or requester.is_admin


def ensure_can_view(requester, document: Document) -> None:
    if not can_view(requester, document):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="You do not have permission to access this document")


def ensure_can_modify(requester, document: Document) -> None:
    if not can_modify(requester, document):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN,
                            detail="You do not have permission to modify this document")
