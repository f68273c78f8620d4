"""
Supabase persistence back-end (supabase-py).

Tables:
  resumes                 — uploaded documents and their parsing status
  parsed_resume_details   — one row per successful parse
Storage:
  bucket ``resumes``      — raw files, keyed by ``supabase_storage_path``

Uses the service-role key; ownership is enforced by filtering on
``user_id`` in every read, mirroring the row-level policies.
"""
from typing import Any, Dict, Optional
import logging

from supabase import Client, create_client

from domain.models import ExtractedCandidateProfile, ProcessingStatus, UploadedDocument
from persistence.base import (
    BlobStorage,
    DocumentRepository,
    DownloadError,
    PersistenceError,
    ProfileRepository,
    StoreBundle,
)

logger = logging.getLogger(__name__)

RESUMES_TABLE = "resumes"
PROFILES_TABLE = "parsed_resume_details"
DOCUMENT_COLUMNS = (
    "id, user_id, file_name, file_size, file_type, "
    "supabase_storage_path, parsing_status, error_message"
)


def supabase_client(url: str, service_role_key: str) -> Client:
    if not (url and service_role_key):
        raise PersistenceError("Missing SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY in env.")
    return create_client(url, service_role_key)


def _document_from_row(row: Dict[str, Any]) -> UploadedDocument:
    try:
        status = ProcessingStatus(row.get("parsing_status") or "pending")
    except ValueError:
        logger.warning("Unknown parsing_status %r for resume %s", row.get("parsing_status"), row.get("id"))
        status = ProcessingStatus.PENDING
    return UploadedDocument(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        file_name=row.get("file_name") or "",
        file_size=row.get("file_size") or 0,
        mime_type=row.get("file_type"),
        storage_path=row.get("supabase_storage_path") or "",
        status=status,
        error_message=row.get("error_message"),
    )


def profile_row(document_id: str, owner_id: str, profile: ExtractedCandidateProfile) -> Dict[str, Any]:
    """Map a profile onto the parsed_resume_details columns."""
    data = profile.to_dict()
    return {
        "resume_id": document_id,
        "user_id": owner_id,
        "full_name": data["full_name"],
        "email": data["email"],
        "phone": data["phone"],
        "location": data["location"],
        "skills_json": data["skills"],
        "experience_json": data["experience"],
        "education_json": data["education"],
        "raw_text_content": data["raw_text"],
    }


class SupabaseDocumentRepository(DocumentRepository):

    def __init__(self, client: Client, table: str = RESUMES_TABLE):
        self.client = client
        self.table = table

    def get(self, document_id: str, owner_id: str) -> Optional[UploadedDocument]:
        try:
            result = (
                self.client.table(self.table)
                .select(DOCUMENT_COLUMNS)
                .eq("id", document_id)
                .eq("user_id", owner_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"DB error fetching resume: {e}") from e

        rows = result.data or []
        return _document_from_row(rows[0]) if rows else None

    def update_status(
        self,
        document_id: str,
        status: ProcessingStatus,
        error_message: Optional[str] = None,
    ) -> None:
        try:
            (
                self.client.table(self.table)
                .update({"parsing_status": status.value, "error_message": error_message})
                .eq("id", document_id)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to update resume status: {e}") from e


class SupabaseProfileRepository(ProfileRepository):

    def __init__(self, client: Client, table: str = PROFILES_TABLE):
        self.client = client
        self.table = table

    def insert(
        self,
        document_id: str,
        owner_id: str,
        profile: ExtractedCandidateProfile,
    ) -> str:
        try:
            result = (
                self.client.table(self.table)
                .insert(profile_row(document_id, owner_id, profile))
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to store parsed data: {e}") from e

        rows = result.data or []
        if not rows or "id" not in rows[0]:
            raise PersistenceError("Insert into parsed_resume_details returned no row")
        return str(rows[0]["id"])


class SupabaseBlobStorage(BlobStorage):

    def __init__(self, client: Client, bucket: str = "resumes"):
        self.client = client
        self.bucket = bucket

    def download(self, storage_path: str) -> bytes:
        try:
            data = self.client.storage.from_(self.bucket).download(storage_path)
        except Exception as e:
            raise DownloadError(f"Failed to download file: {e}") from e
        if data is None:
            raise DownloadError(f"Failed to download file: no content returned for {storage_path}")
        return bytes(data)


def create_supabase_store(
    url: str = "",
    service_role_key: str = "",
    bucket: str = "resumes",
    client: Optional[Client] = None,
) -> StoreBundle:
    client = client or supabase_client(url, service_role_key)
    return StoreBundle(
        documents=SupabaseDocumentRepository(client),
        profiles=SupabaseProfileRepository(client),
        storage=SupabaseBlobStorage(client, bucket=bucket),
    )
