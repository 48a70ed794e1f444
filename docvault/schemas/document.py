
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, StringConstraints
from pydantic.alias_generators import to_camel

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=255)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]

class DocumentUploadIn(BaseModel):
    title: Title
    description: Description | None = None
    is_public: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class DocumentUpdateIn(BaseModel):
    title: Title | None = None
    description: Description | None = None
    is_public: bool | None = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

class DocumentOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None = None
    file_path: str
    file_type: str
    file_size: int
    ocr_text: str | None = None
    is_public: bool
    created_at: datetime
    updated_at: datetime
    file_url: str = ""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

class SearchResultOut(DocumentOut):
    relevance: str
