"""
Tests for the profile normalizer
"""
from datetime import datetime

import pytest

from jobassist.models.profile import EducationEntry, ExperienceEntry, LanguageEntry, NormalizedProfile
from jobassist.services.profile_normalizer import (
    extract_string_list,
    first_present,
    generate_professional_summary,
    log_profile_summary,
    normalize,
    parse_certification_text,
    parse_education_text,
    parse_experience_text,
    parse_language_text,
    parse_project_text,
    to_plain,
)

COLLECTION_FIELDS = (
    "experience", "education", "projects", "certifications", "languages",
    "technical_tools", "volunteer_work", "publications", "awards", "skills", "desired_roles",
)


class TestAliasLookup:
    """Test field resolution through the alias table"""

    def test_alternate_field_names(self):
        """Test that alternate names resolve to canonical fields"""
        profile = normalize({
            "fullName": "Ravi Kumar",
            "emailAddress": "ravi@example.com",
            "workExperience": [{"companyName": "Acme", "position": "Developer"}],
            "educationalBackground": [{"school": "MIT", "degreeType": "BS"}],
            "keySkills": ["Python"],
        })
        assert profile.name == "Ravi Kumar"
        assert profile.email == "ravi@example.com"
        assert profile.experience == (ExperienceEntry(company="Acme", role="Developer"),)
        assert profile.education == (EducationEntry(degree="BS", university="MIT"),)
        assert profile.skills == ("Python",)

    def test_first_present_skips_empty_values(self):
        """Test that blank aliases fall through to the next one"""
        assert first_present({"name": "  ", "fullName": "Ravi"}, ("name", "fullName")) == "Ravi"
        assert first_present({"name": []}, ("name",)) is None

    def test_start_and_end_dates_become_duration(self):
        """Test that startDate/endDate compose a duration"""
        profile = normalize({"experience": [{"company": "Acme", "role": "Dev", "startDate": "2021"}]})
        assert profile.experience[0].duration == "2021 - Present"

    def test_desired_roles_from_job_preferences(self):
        """Test that roles nested in jobPreferences are found"""
        profile = normalize({"jobPreferences": {"roles": ["Data Analyst"]}})
        assert profile.desired_roles == ("Data Analyst",)


class TestExtractionStrategies:
    """Test the ordered extraction strategies"""

    def test_firestore_map_instead_of_array(self):
        """Test that a map of records is read like a list"""
        profile = normalize({"experience": {
            "0": {"company": "Acme", "role": "Dev"},
            "1": {"company": "Globex", "role": "Lead"},
        }})
        assert [e.company for e in profile.experience] == ["Acme", "Globex"]

    def test_single_record_map(self):
        """Test that a lone record stored as a map becomes one entry"""
        profile = normalize({"education": {"degree": "MBA", "university": "IIM"}})
        assert profile.education == (EducationEntry(degree="MBA", university="IIM"),)

    def test_experience_free_text(self):
        """Test bold/pipe experience text"""
        entries = parse_experience_text("**Software Engineer** | Acme | 2020 - 2022\n• Built APIs\n• Wrote tests")
        assert entries == [ExperienceEntry(company="Acme", role="Software Engineer",
                                           duration="2020 - 2022", description="Built APIs\nWrote tests")]

    def test_experience_text_with_at(self):
        """Test 'Role at Company' headers"""
        entries = parse_experience_text("Data Analyst at Globex\n- Built dashboards")
        assert entries[0].role == "Data Analyst"
        assert entries[0].company == "Globex"
        assert entries[0].description == "Built dashboards"

    def test_education_free_text(self):
        """Test comma-separated education text"""
        entries = parse_education_text("B.Tech in Computer Science, IIT Delhi, 2019")
        assert entries == [EducationEntry(degree="B.Tech in Computer Science", university="IIT Delhi",
                                          year="2019")]

    def test_project_free_text(self):
        """Test project text with a tech line"""
        entries = parse_project_text("Chat App\nTech: React, Node\n- Real-time messaging")
        assert entries[0].title == "Chat App"
        assert entries[0].tech == "React, Node"
        assert entries[0].description == "Real-time messaging"

    def test_certification_free_text(self):
        """Test 'issued by' certification text"""
        entries = parse_certification_text("AWS Developer issued by Amazon; CKA - CNCF")
        assert [(c.title, c.issuer) for c in entries] == [("AWS Developer", "Amazon"), ("CKA", "CNCF")]

    def test_language_free_text(self):
        """Test parenthesised proficiency"""
        entries = parse_language_text("English (Fluent), Tamil")
        assert entries == [LanguageEntry("English", "Fluent"), LanguageEntry("Tamil", "")]

    def test_skills_from_delimited_text(self):
        """Test skills pasted as one string"""
        assert extract_string_list("Python, Go; SQL\nDocker") == ("Python", "Go", "SQL", "Docker")

    def test_skills_from_objects(self):
        """Test skill objects with a name key"""
        assert extract_string_list([{"name": "Python"}, {"skill": "Go"}, "SQL"]) == ("Python", "Go", "SQL")

    def test_unidentified_records_dropped(self):
        """Test that records without identifying fields are discarded"""
        profile = normalize({"experience": [{"duration": "2020"}, {"company": "Acme"}]})
        assert profile.experience == (ExperienceEntry(company="Acme"),)


class TestTotality:
    """Test that normalize never raises"""

    @pytest.mark.parametrize("document", [
        None,
        "just a string",
        42,
        [],
        {"experience": 5, "skills": {"a": "Python"}, "education": None, "name": ["A", "B"]},
        {"experience": [None, 3, ["nested"]], "languages": True},
        {"projects": {"x": {"y": {"z": "deep"}}}},
    ])
    def test_malformed_documents(self, document):
        """Test malformed inputs yield a profile with tuple collections"""
        profile = normalize(document)
        assert isinstance(profile, NormalizedProfile)
        for name in COLLECTION_FIELDS:
            assert isinstance(getattr(profile, name), tuple)

    def test_deeply_nested_document(self):
        """Test that very deep nesting is cut off"""
        nested = {"value": "bottom"}
        for _ in range(50):
            nested = {"inner": nested}
        profile = normalize({"name": "Deep", "experience": nested})
        assert profile.name == "Deep"
        assert profile.experience == ()

    def test_firestore_values_converted(self):
        """Test timestamps become ISO strings"""
        assert to_plain({"dob": datetime(2000, 1, 2)}) == {"dob": "2000-01-02T00:00:00"}
        profile = normalize({"dateOfBirth": datetime(2000, 1, 2)})
        assert profile.date_of_birth == "2000-01-02T00:00:00"


class TestIdempotence:
    """Test that normalizing normalized data is a no-op"""

    def test_structured_profile(self, experienced_profile):
        """Test structured documents round-trip"""
        profile = normalize(experienced_profile)
        assert normalize(profile.to_dict()) == profile

    def test_text_profile(self):
        """Test text-derived documents round-trip"""
        profile = normalize({
            "name": "Meera",
            "experience": "**Analyst** | Globex | 2019 - 2021\n• Reports",
            "education": "B.Tech in Computer Science, IIT Delhi, 2019",
            "languages": "English (Fluent)",
            "skills": "Python, SQL",
        })
        assert profile.experience[0].company == "Globex"
        assert normalize(profile.to_dict()) == profile


class TestProfileHelpers:
    """Test logging and summary helpers"""

    def test_log_profile_summary(self, experienced_profile):
        """Test section counts are reported"""
        summary = log_profile_summary(normalize(experienced_profile), "test")
        assert summary["has_name"] is True
        assert summary["experience_count"] == 3
        assert summary["skills_count"] == 3

    def test_fresher_summary_has_no_years(self, fresher_profile):
        """Test the template summary never claims years for a fresher"""
        summary = generate_professional_summary(normalize(fresher_profile), "Backend Developer")
        assert "years" not in summary
        assert "Python" in summary
