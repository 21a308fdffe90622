"""Pydantic schemas for POST /api/files/upload and POST /api/visit-history."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.validators import FILE_PATH_REQUIRED, require_non_empty
from app.schemas.visits import VisitCreate, VisitWithPhotos


class UploadFileData(BaseModel):
    """One file of an upload request, content base64-encoded."""

    name: str = Field(min_length=1)
    base64_data: str = Field(alias="base64Data")
    size: int = Field(ge=0)
    type: str
    description: str = ""


class UploadRequest(BaseModel):
    files: List[UploadFileData] = Field(min_length=1)


class UploadedFile(BaseModel):
    """Stored file. file_path is the public URL path to put in visit_photos.file_path."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_name: str
    file_path: str
    original_name: str
    size: int
    mime_type: str
    description: str = ""


class UploadResultData(BaseModel):
    files: List[UploadedFile]


class VisitFileRef(BaseModel):
    """Previously uploaded file to attach to a new visit."""

    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath")
    description: str = ""

    @field_validator("file_path")
    @classmethod
    def _file_path_required(cls, v: str) -> str:
        return require_non_empty(v, "file_path_required", FILE_PATH_REQUIRED)


class VisitHistoryCreate(VisitCreate):
    """Visit plus its photos, stored in one transaction."""

    files: List[VisitFileRef] = []


class VisitHistoryCreated(BaseModel):
    visit: VisitWithPhotos
    photos_count: int
