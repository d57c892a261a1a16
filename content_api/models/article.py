# content_api/models/article.py
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class Article(BaseModel):
    """Article document as stored in the `article` collection."""
    id: int = Field(..., alias="_id")
    title: str
    content: str = ""
    author: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True

    # --- Pydantic Schemas ---
    class Create(BaseModel):
        title: str = Field(..., min_length=1, max_length=200)
        content: str = Field(default="")
        author: Optional[str] = Field(None, max_length=100)
        tags: List[str] = Field(default_factory=list)

    class Update(BaseModel):
        """Only the fields that are set get merged into the stored article."""
        title: Optional[str] = Field(None, min_length=1, max_length=200)
        content: Optional[str] = None
        author: Optional[str] = Field(None, max_length=100)
        tags: Optional[List[str]] = None

    class Response(BaseModel):
        id: int
        title: str
        content: str
        author: Optional[str] = None
        tags: List[str] = Field(default_factory=list)
        created_at: datetime
        updated_at: datetime

        class Config:
            from_attributes = True
