"""
Tests for the Firestore resume store (Firestore mocked)
"""
from unittest.mock import Mock

import pytest

from jobassist.services.resume_store import ResumeStore
from jobassist.utils.exceptions import NotFoundError


def _doc(doc_id="doc1", data=None, exists=True):
    doc = Mock()
    doc.id = doc_id
    doc.exists = exists
    doc.to_dict.return_value = data
    return doc


@pytest.fixture
def user_ref(mock_db):
    return mock_db.collection.return_value.document.return_value


@pytest.fixture
def resumes_ref(user_ref):
    return user_ref.collection.return_value


class TestUserProfile:
    """Test profile reads"""

    def test_get_user_profile(self, mock_db, user_ref):
        """Test the profile document is returned"""
        user_ref.get.return_value = _doc("u1", {"name": "Asha"})
        assert ResumeStore(mock_db).get_user_profile("u1") == {"name": "Asha"}
        mock_db.collection.assert_called_with("users")
        mock_db.collection.return_value.document.assert_called_with("u1")

    def test_missing_profile(self, mock_db, user_ref):
        """Test a missing profile raises NotFoundError"""
        user_ref.get.return_value = _doc(exists=False)
        with pytest.raises(NotFoundError) as exc_info:
            ResumeStore(mock_db).get_user_profile("u1")
        assert exc_info.value.message == "User profile not found"


class TestResumes:
    """Test resume records"""

    def test_save_resume(self, mock_db, user_ref, resumes_ref):
        """Test records go under users/{uid}/resumes with a generated id"""
        new_ref = resumes_ref.document.return_value
        new_ref.id = "r1"
        record = {"role": "SRE"}

        assert ResumeStore(mock_db).save_resume("u1", record) == "r1"
        user_ref.collection.assert_called_with("resumes")
        resumes_ref.document.assert_called_with()
        new_ref.set.assert_called_once_with(record)

    def test_get_resume(self, mock_db, resumes_ref):
        """Test the record is returned with its id"""
        resumes_ref.document.return_value.get.return_value = _doc("r1", {"role": "SRE"})
        assert ResumeStore(mock_db).get_resume("u1", "r1") == {"role": "SRE", "id": "r1"}

    def test_get_missing_resume(self, mock_db, resumes_ref):
        """Test a missing resume raises NotFoundError"""
        resumes_ref.document.return_value.get.return_value = _doc(exists=False)
        with pytest.raises(NotFoundError):
            ResumeStore(mock_db).get_resume("u1", "missing")

    def test_list_resumes(self, mock_db, resumes_ref):
        """Test summaries are newest first and leave out content"""
        query = resumes_ref.order_by.return_value.limit.return_value
        query.stream.return_value = [
            _doc("r2", {"role": "SRE", "createdAt": "2024-02-01", "content": {"summary": "x"},
                        "generationMetadata": {"resumeType": "experienced", "fallback": True}}),
            _doc("r1", {"role": "QA", "createdAt": "2024-01-01"}),
        ]

        summaries = ResumeStore(mock_db).list_resumes("u1", limit=10)

        resumes_ref.order_by.assert_called_once_with("createdAt", direction="DESCENDING")
        resumes_ref.order_by.return_value.limit.assert_called_once_with(10)
        assert [s["id"] for s in summaries] == ["r2", "r1"]
        assert summaries[0] == {"id": "r2", "role": "SRE", "createdAt": "2024-02-01",
                                "resumeType": "experienced", "fallback": True, "degradedSections": []}
        assert summaries[1]["fallback"] is False
