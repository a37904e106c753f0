"""
Tests for the generation request builder
"""
import json

import pytest

from jobassist.services.profile_normalizer import normalize
from jobassist.services.prompt_builder import build_prompt, output_contract
from jobassist.services.resume_strategy import select_strategy
from jobassist.utils.exceptions import ValidationError


def _contract_from(prompt: str) -> dict:
    tail = prompt.split("Return ONLY valid JSON with this exact structure:\n", 1)[1]
    return json.JSONDecoder().raw_decode(tail)[0]


class TestBuildPrompt:
    """Test prompt assembly"""

    def test_contains_profile_and_role(self, experienced_profile):
        """Test that profile data and the target role are written out"""
        profile = normalize(experienced_profile)
        prompt = build_prompt(profile, select_strategy(profile), "Backend Engineer")
        assert "TARGET ROLE: Backend Engineer" in prompt
        assert "RESUME TYPE: EXPERIENCED" in prompt
        assert "Acme Corp" in prompt
        assert "Priya Sharma" in prompt

    def test_empty_sections_are_explicit(self, fresher_profile):
        """Test absent collections get a no-data sentinel"""
        profile = normalize(fresher_profile)
        prompt = build_prompt(profile, select_strategy(profile), "Data Analyst")
        assert "No experience data provided" in prompt
        assert "No job description provided" in prompt

    def test_extra_requirements_included(self, fresher_profile):
        """Test the job description reaches the prompt"""
        profile = normalize({**fresher_profile, "extraRequirements": "Must know SQL"})
        prompt = build_prompt(profile, select_strategy(profile), "Data Analyst")
        assert "Must know SQL" in prompt

    def test_deterministic(self, experienced_profile):
        """Test the same input yields the same prompt"""
        profile = normalize(experienced_profile)
        strategy = select_strategy(profile)
        assert build_prompt(profile, strategy, "SRE") == build_prompt(profile, strategy, "SRE")

    @pytest.mark.parametrize("role", ["", "   ", None])
    def test_missing_role(self, fresher_profile, role):
        """Test that a missing role is rejected"""
        profile = normalize(fresher_profile)
        with pytest.raises(ValidationError) as exc_info:
            build_prompt(profile, select_strategy(profile), role)
        assert "Target role is required" in exc_info.value.message


class TestOutputContract:
    """Test the JSON contract embedded in the prompt"""

    def test_fresher_uses_objective(self, fresher_profile):
        """Test freshers get an objective instead of a summary"""
        profile = normalize(fresher_profile)
        contract = json.loads(output_contract(profile, select_strategy(profile)))
        assert "objective" in contract
        assert "summary" not in contract
        assert contract["header"]["name"] == "Asha"

    def test_contract_embedded_in_prompt(self, experienced_profile):
        """Test the prompt carries a parseable contract"""
        profile = normalize(experienced_profile)
        contract = _contract_from(build_prompt(profile, select_strategy(profile), "SRE"))
        assert "summary" in contract
        assert set(contract) >= {"experience", "education", "projects", "awards", "latexCode"}
