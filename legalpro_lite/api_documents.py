"""
Documents & Folders API
=======================

Endpoints (mounted under /api):
- GET    /documents/folders        - List folders
- POST   /documents/folders        - Create folder
- PUT    /documents/folders/{id}   - Rename folder
- DELETE /documents/folders/{id}   - Delete folder, sub-folders and their files
- GET    /documents/files          - List files (optionally ?folderId=)
- PUT    /documents/files/{id}     - Update file metadata
- DELETE /documents/files/{id}     - Delete file
- POST   /documents/upload         - Upload one or more files (multipart)

Stored files are served to their owner at GET /uploads/{name}.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from .auth import AuthContext
from .db.models import Document, Folder
from .dependencies import expected_version, get_db_dependency, require_session
from .errors import NotFound
from .repository import OwnedRepository
from .schemas import (
    DocumentEnvelope,
    DocumentListEnvelope,
    DocumentResponse,
    DocumentUpdate,
    FolderCreate,
    FolderEnvelope,
    FolderListEnvelope,
    FolderResponse,
    FolderUpdate,
    OkResponse,
)
from .storage import get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])
uploads_router = APIRouter(tags=["Documents"])


def _owned_folder(db: Session, owner_id: str, folder_id: Optional[str]) -> Optional[Folder]:
    """Folder lookup for a reference; a foreign or missing folder is NotFound."""
    if not folder_id:
        return None
    folder = OwnedRepository(db, Folder, owner_id).find(folder_id)
    if folder is None:
        raise NotFound("Folder not found")
    return folder


# =============================================================================
# FOLDERS
# =============================================================================

@router.get("/folders", response_model=FolderListEnvelope)
async def list_folders(
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    folders = OwnedRepository(db, Folder, auth.user_id).list()
    return FolderListEnvelope(folders=[FolderResponse.model_validate(f) for f in folders])


@router.post("/folders", response_model=FolderEnvelope, status_code=201)
async def create_folder(
    payload: FolderCreate,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    _owned_folder(db, auth.user_id, payload.parent_id)
    folder = OwnedRepository(db, Folder, auth.user_id).create(payload.to_record())
    logger.info(f"Created folder {folder.id} ({folder.name})")
    return FolderEnvelope(folder=FolderResponse.model_validate(folder))


@router.put("/folders/{folder_id}", response_model=FolderEnvelope)
async def rename_folder(
    folder_id: str,
    payload: FolderUpdate,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    folder = OwnedRepository(db, Folder, auth.user_id).update(folder_id, {"name": payload.name})
    return FolderEnvelope(folder=FolderResponse.model_validate(folder))


@router.delete("/folders/{folder_id}", response_model=OkResponse)
async def delete_folder(
    folder_id: str,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    """
    Delete a folder with everything below it.

    Documents in the folder tree are removed together with their stored files.
    A stored file that cannot be removed is logged and skipped; the records are
    deleted regardless.
    """
    folders = OwnedRepository(db, Folder, auth.user_id)
    root = folders.get(folder_id)

    # Breadth-first walk; deleting in reverse removes children before parents
    tree: List[Folder] = [root]
    index = 0
    while index < len(tree):
        tree.extend(folders.list(parent_id=tree[index].id))
        index += 1

    storage = get_storage()
    folder_ids = [f.id for f in tree]
    documents = (
        OwnedRepository(db, Document, auth.user_id)
        .query()
        .filter(Document.folder_id.in_(folder_ids))
        .all()
    )
    for doc in documents:
        storage.delete(doc.storage_key)
        db.delete(doc)
    db.flush()

    for folder in reversed(tree):
        db.delete(folder)
        db.flush()

    db.commit()
    logger.info(f"Deleted folder {folder_id}: {len(tree)} folder(s), {len(documents)} file(s)")
    return OkResponse()


# =============================================================================
# FILES
# =============================================================================

@router.get("/files", response_model=DocumentListEnvelope)
async def list_files(
    folder_id: Optional[str] = Query(None, alias="folderId"),
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    repo = OwnedRepository(db, Document, auth.user_id)
    documents = repo.list(folder_id=folder_id) if folder_id else repo.list()
    return DocumentListEnvelope(files=[DocumentResponse.model_validate(d) for d in documents])


@router.put("/files/{file_id}", response_model=DocumentEnvelope)
async def update_file(
    file_id: str,
    payload: DocumentUpdate,
    version: Optional[int] = Depends(expected_version),
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    data = payload.to_record(partial=True)
    _owned_folder(db, auth.user_id, data.get("folder_id"))
    doc = OwnedRepository(db, Document, auth.user_id).update(file_id, data, expected_version=version)
    return DocumentEnvelope(file=DocumentResponse.model_validate(doc))


@router.delete("/files/{file_id}", response_model=OkResponse)
async def delete_file(
    file_id: str,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    repo = OwnedRepository(db, Document, auth.user_id)
    doc = repo.get(file_id)
    get_storage().delete(doc.storage_key)
    repo.delete(file_id)
    return OkResponse()


@router.post("/upload", response_model=DocumentListEnvelope, status_code=201)
async def upload_files(
    files: List[UploadFile] = File(...),
    folder_id: Optional[str] = Form(None, alias="folderId"),
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    """
    Upload files into the owner's library.

    Every file gets a generated stored name and the metadata record points at
    /uploads/<stored name>.
    """
    _owned_folder(db, auth.user_id, folder_id)
    storage = get_storage()

    stored_keys: List[str] = []
    documents: List[Document] = []
    try:
        for upload in files:
            data = await upload.read()
            key = storage.generate_key(upload.filename)
            stored = storage.put(key, data, content_type=upload.content_type)
            stored_keys.append(stored.key)

            doc = Document(
                owner_id=auth.user_id,
                folder_id=folder_id,
                name=upload.filename or stored.key,
                mime_type=upload.content_type,
                size=stored.size_bytes,
                storage_key=stored.key,
                url=stored.url,
                tags=[],
            )
            db.add(doc)
            documents.append(doc)

        db.commit()
    except Exception:
        db.rollback()
        for key in stored_keys:
            storage.delete(key)
        raise

    for doc in documents:
        db.refresh(doc)

    logger.info(f"Uploaded {len(documents)} file(s) for user {auth.user_id}")
    return DocumentListEnvelope(files=[DocumentResponse.model_validate(d) for d in documents])


# =============================================================================
# STORED FILES
# =============================================================================

@uploads_router.get("/uploads/{name}")
async def serve_upload(
    name: str,
    auth: AuthContext = Depends(require_session),
    db: Session = Depends(get_db_dependency),
):
    """Serve a stored file to the user who uploaded it."""
    doc = (
        OwnedRepository(db, Document, auth.user_id)
        .query()
        .filter(Document.storage_key == name)
        .first()
    )
    storage = get_storage()
    if doc is None or not storage.exists(name):
        raise NotFound()

    return FileResponse(
        storage.path_for(name),
        media_type=doc.mime_type or "application/octet-stream",
        filename=doc.name,
        content_disposition_type="inline",
    )
