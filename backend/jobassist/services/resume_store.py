"""
Firestore-backed document store for profiles and generated resumes.

users/{uid}                  profile document
users/{uid}/resumes/{id}     resume records built by build_resume_record()
"""
import logging
from typing import Any, Dict, List

from jobassist.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
RESUMES_COLLECTION = "resumes"
DEFAULT_LIST_LIMIT = 50


class ResumeStore:
    def __init__(self, db):
        self.db = db

    def _user_ref(self, user_id: str):
        return self.db.collection(USERS_COLLECTION).document(user_id)

    def _resumes_ref(self, user_id: str):
        return self._user_ref(user_id).collection(RESUMES_COLLECTION)

    def get_user_profile(self, user_id: str) -> Dict[str, Any]:
        """Raw profile document for user_id. Raises NotFoundError if there is none."""
        doc = self._user_ref(user_id).get()
        if not doc.exists:
            raise NotFoundError("User profile", details={"userId": user_id})
        return doc.to_dict() or {}

    def save_resume(self, user_id: str, record: Dict[str, Any]) -> str:
        """Store a resume record and return its new document id."""
        doc_ref = self._resumes_ref(user_id).document()
        doc_ref.set(record)
        logger.info(f"[ResumeStore] Saved resume {doc_ref.id}", extra={"user_id": user_id})
        return doc_ref.id

    def get_resume(self, user_id: str, resume_id: str) -> Dict[str, Any]:
        doc = self._resumes_ref(user_id).document(resume_id).get()
        if not doc.exists:
            raise NotFoundError("Resume", details={"userId": user_id, "resumeId": resume_id})
        record = doc.to_dict() or {}
        record["id"] = doc.id
        return record

    def list_resumes(self, user_id: str, limit: int = DEFAULT_LIST_LIMIT) -> List[Dict[str, Any]]:
        """Newest-first summaries; full content and the profile copy are left out."""
        query = self._resumes_ref(user_id).order_by("createdAt", direction="DESCENDING").limit(limit)
        summaries = []
        for doc in query.stream():
            data = doc.to_dict() or {}
            metadata = data.get("generationMetadata") or {}
            summaries.append({
                "id": doc.id,
                "role": data.get("role"),
                "createdAt": data.get("createdAt"),
                "resumeType": metadata.get("resumeType"),
                "fallback": metadata.get("fallback", False),
                "degradedSections": metadata.get("degradedSections", []),
            })
        return summaries
