"""
Resume Response Parser - recover a GeneratedResume from model output.

The model is asked to return each collection section as text in a fixed
record convention:

    **Role** | Company | Duration
    • bullet
    • bullet

Records are separated by blank lines. Each section has its own header
pattern; blocks that don't match are dropped and the section is marked
"unparsed" when nothing survived. The model sometimes returns proper lists of
objects instead, which are mapped through the profile normalizer's entry
aliases.

parse() never raises.
"""
import json
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from jobassist.models.profile import (
    AwardEntry,
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    LanguageEntry,
    ProjectEntry,
    PublicationEntry,
    VolunteerEntry,
    bullet_lines,
    is_identified,
)
from jobassist.models.resume import (
    COLLECTION_SECTIONS,
    SECTION_ABSENT,
    SECTION_PARSED,
    SECTION_UNPARSED,
    GeneratedResume,
    ResumeHeader,
)
from jobassist.services.profile_normalizer import (
    BLANK_LINE_RE,
    DATE_RANGE_RE,
    SCALAR_ALIASES,
    coerce_text,
    first_present,
    map_record,
)
from jobassist.utils.exceptions import GenerationFailed

logger = logging.getLogger(__name__)

# ============================================================================
# PATTERNS
# ============================================================================

HEADER3_RE = re.compile(r"^\*\*(.*?)\*\*\s*\|\s*([^|]*?)\s*\|\s*(.*)$")
HEADER2_RE = re.compile(r"^\*\*(.*?)\*\*\s*(?:(?:\||[—–-])\s*(.*))?$")
PROJECT_RE = re.compile(r"^\*\*(.*?)\*\*\s*\|\s*(?:Technologies|Tech(?:\s*Stack)?)\s*:\s*(.*)$", re.IGNORECASE)
DASH_TITLED_RE = re.compile(r"^\*\*(.*?)\*\*\s*[—–-]\s*(.+?),\s*(.+)$")
HEADER_START_RE = re.compile(r"^\*\*.*?\*\*\s*(?:\||[—–-]|$)")
LANGUAGE_PAREN_RE = re.compile(r"^(.+?)\s*\((.+?)\)$")
BULLET_RE = re.compile(r"^(?:[•\-–]|\*(?!\*))\s*")
CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

SUMMARY_KEYS = ("summary", "objective", "profileSummary", "professionalSummary")
SKILL_ITEM_KEYS = ("name", "skill", "value", "title", "label")
BULLET = "•"

# ============================================================================
# JSON EXTRACTION
# ============================================================================


def extract_json_object(text: Any) -> Dict[str, Any]:
    """
    Decode the first JSON object in raw model text.

    Handles bare JSON, fenced ```json blocks, and prose around the object.

    Raises:
        GenerationFailed: when no JSON object can be decoded
    """
    if isinstance(text, Mapping):
        return dict(text)
    if not isinstance(text, str) or not text.strip():
        raise GenerationFailed("model returned no content", raw_output=text if isinstance(text, str) else None)

    cleaned = CODE_FENCE_RE.sub("", text.strip())
    try:
        value = json.loads(cleaned)
        if isinstance(value, dict):
            return value
    except (ValueError, RecursionError):
        pass

    decoder = json.JSONDecoder()
    start = cleaned.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(cleaned, start)
            if isinstance(value, dict):
                return value
        except (ValueError, RecursionError):
            pass
        start = cleaned.find("{", start + 1)

    raise GenerationFailed("model output is not a JSON object", raw_output=text)


# ============================================================================
# RECORD SPLITTING
# ============================================================================

def _strip_bullet(line: str) -> str:
    return BULLET_RE.sub("", line.strip(), count=1).strip()


def _is_record_header(line: str) -> bool:
    return bool(HEADER_START_RE.match(line.strip()))


def split_blocks(text: str) -> List[List[str]]:
    """
    Split section text into records.

    A record starts at every bold header line. Blank lines also end a record,
    but a block with no header of its own (e.g. bullets after a stray blank
    line) is attached to the record before it.
    """
    records: List[List[str]] = []
    for block in BLANK_LINE_RE.split(text.replace("\r\n", "\n")):
        lines = [line.strip() for line in block.split("\n") if line.strip()]
        if not lines:
            continue
        if not _is_record_header(lines[0]) and records:
            lead = 0
            while lead < len(lines) and not _is_record_header(lines[lead]):
                lead += 1
            records[-1].extend(lines[:lead])
            lines = lines[lead:]
        current: List[str] = []
        for line in lines:
            if _is_record_header(line) and current:
                records.append(current)
                current = []
            current.append(line)
        if current:
            records.append(current)
    return records


def _description(lines: List[str]) -> str:
    return "\n".join(item for item in (_strip_bullet(line) for line in lines) if item)


# ============================================================================
# PER-SECTION RECORD PARSERS
# ============================================================================

def _role_record(lines: List[str]) -> Optional[Tuple[str, str, str, str]]:
    header = lines[0].strip()
    match = HEADER3_RE.match(header)
    if match:
        role, org, duration = match.groups()
    else:
        match = HEADER2_RE.match(header)
        if not match:
            return None
        role, org, duration = match.group(1), match.group(2) or "", ""
    return role.strip(), org.strip(), duration.strip(), _description(lines[1:])


def parse_experience_record(lines: List[str]) -> Optional[ExperienceEntry]:
    fields = _role_record(lines)
    if fields is None:
        return None
    role, company, duration, description = fields
    return ExperienceEntry(company=company, role=role, duration=duration, description=description)


def parse_volunteer_record(lines: List[str]) -> Optional[VolunteerEntry]:
    fields = _role_record(lines)
    if fields is None:
        return None
    role, organization, duration, description = fields
    return VolunteerEntry(role=role, organization=organization, duration=duration, description=description)


def parse_education_record(lines: List[str]) -> Optional[EducationEntry]:
    header = lines[0].strip()
    match = HEADER3_RE.match(header)
    if match:
        degree, university, when = (g.strip() for g in match.groups())
    else:
        match = HEADER2_RE.match(header)
        if not match:
            return None
        degree, university, when = match.group(1).strip(), (match.group(2) or "").strip(), ""
    if DATE_RANGE_RE.fullmatch(when):
        return EducationEntry(degree=degree, university=university, duration=when)
    return EducationEntry(degree=degree, university=university, year=when)


def parse_project_record(lines: List[str]) -> Optional[ProjectEntry]:
    header = lines[0].strip()
    match = PROJECT_RE.match(header) or HEADER2_RE.match(header)
    if not match:
        return None
    title, tech = match.group(1), match.group(2) or ""
    return ProjectEntry(title=title.strip(), tech=tech.strip(), description=_description(lines[1:]))


def parse_certification_record(lines: List[str]) -> Optional[CertificationEntry]:
    match = HEADER2_RE.match(lines[0].strip())
    if not match:
        return None
    return CertificationEntry(title=match.group(1).strip(), issuer=(match.group(2) or "").strip())


def _titled_record(lines: List[str]) -> Optional[Tuple[str, str, str]]:
    header = lines[0].strip()
    match = HEADER3_RE.match(header) or DASH_TITLED_RE.match(header)
    if match:
        return tuple(g.strip() for g in match.groups())
    match = HEADER2_RE.match(header)
    if not match:
        return None
    return match.group(1).strip(), (match.group(2) or "").strip(), ""


def parse_publication_record(lines: List[str]) -> Optional[PublicationEntry]:
    fields = _titled_record(lines)
    if fields is None:
        return None
    title, publication, date = fields
    return PublicationEntry(title=title, publication=publication, date=date)


def parse_award_record(lines: List[str]) -> Optional[AwardEntry]:
    fields = _titled_record(lines)
    if fields is None:
        return None
    title, organization, date = fields
    return AwardEntry(title=title, organization=organization, date=date)


def _records_from_text(text: str, record_parser: Callable[[List[str]], Any]) -> List[Any]:
    entries = []
    for lines in split_blocks(text):
        entry = record_parser(lines)
        if entry is not None and is_identified(entry):
            entries.append(entry)
    return entries


def parse_languages_text(text: str) -> List[LanguageEntry]:
    """Languages come as bold records or as a comma list such as 'English (Native), Hindi (Fluent)'."""
    entries = []
    for raw_line in text.replace("\r\n", "\n").split("\n"):
        line = _strip_bullet(raw_line)
        if not line:
            continue
        match = HEADER2_RE.match(line)
        if match:
            entries.append(LanguageEntry(language=match.group(1).strip(),
                                         proficiency=(match.group(2) or "").strip()))
            continue
        for item in line.split(","):
            item = item.strip()
            paren = LANGUAGE_PAREN_RE.match(item)
            if paren:
                entries.append(LanguageEntry(language=paren.group(1).strip(), proficiency=paren.group(2).strip()))
            elif item and len(item.split()) <= 3 and not any(ch.isdigit() for ch in item):
                entries.append(LanguageEntry(language=item.replace("**", "").strip()))
    return [e for e in entries if is_identified(e)]


# section key -> (GeneratedResume attribute, entry type, text parser)
SECTION_PARSERS: Dict[str, Tuple[str, type, Callable[[str], List[Any]]]] = {
    "experience": ("experience", ExperienceEntry, lambda t: _records_from_text(t, parse_experience_record)),
    "education": ("education", EducationEntry, lambda t: _records_from_text(t, parse_education_record)),
    "projects": ("projects", ProjectEntry, lambda t: _records_from_text(t, parse_project_record)),
    "certifications": ("certifications", CertificationEntry,
                       lambda t: _records_from_text(t, parse_certification_record)),
    "languages": ("languages", LanguageEntry, parse_languages_text),
    "volunteerWork": ("volunteer_work", VolunteerEntry, lambda t: _records_from_text(t, parse_volunteer_record)),
    "publications": ("publications", PublicationEntry,
                     lambda t: _records_from_text(t, parse_publication_record)),
    "awards": ("awards", AwardEntry, lambda t: _records_from_text(t, parse_award_record)),
}

# ============================================================================
# SANITIZATION
# ============================================================================


def _has_content(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, Mapping)):
        return len(value) > 0
    return True


def sanitize_section(value: Any, entry_type: type, text_parser: Callable[[str], List[Any]]) -> Tuple:
    """Coerce one collection section into a tuple of entries, discarding unusable shapes."""
    if isinstance(value, str):
        return tuple(text_parser(value))
    if isinstance(value, Mapping):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    entries = []
    for item in value:
        if isinstance(item, Mapping):
            entry = map_record(item, entry_type)
            if entry is not None:
                entries.append(entry)
        elif isinstance(item, str):
            entries.extend(text_parser(item))
    return tuple(entries)


def format_skills(value: Any) -> str:
    """Skills or tools as one display string: lists join with ', ', category maps become lines."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Mapping):
        lines = []
        for category, items in value.items():
            text = format_skills(items)
            if text:
                lines.append(f"{category}: {text}")
        return "\n".join(lines)
    if isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if isinstance(item, Mapping):
                category = item.get("category")
                listed = item.get("items") or item.get("skills")
                if category and listed:
                    items.append(f"{category}: {format_skills(listed)}")
                    continue
                text = coerce_text(first_present(item, SKILL_ITEM_KEYS))
            else:
                text = format_skills(item)
            if text:
                items.append(text)
        return ", ".join(items)
    return coerce_text(value)


def parse_header(value: Any) -> ResumeHeader:
    if not isinstance(value, Mapping):
        return ResumeHeader()
    return ResumeHeader(
        name=coerce_text(first_present(value, SCALAR_ALIASES["name"])),
        email=coerce_text(first_present(value, SCALAR_ALIASES["email"])),
        phone=coerce_text(first_present(value, SCALAR_ALIASES["phone"])),
        linkedin=coerce_text(first_present(value, SCALAR_ALIASES["linkedin"])),
        github=coerce_text(first_present(value, SCALAR_ALIASES["github"])),
        portfolio_url=coerce_text(first_present(value, SCALAR_ALIASES["portfolio_url"])),
        location=coerce_text(first_present(value, SCALAR_ALIASES["location"] + ("address",))),
    )


# ============================================================================
# PUBLIC API
# ============================================================================

def _unparsed_resume(status: str) -> GeneratedResume:
    return GeneratedResume(section_status={name: status for name in COLLECTION_SECTIONS})


def parse_mapping(data: Mapping) -> GeneratedResume:
    values: Dict[str, Any] = {}
    status: Dict[str, str] = {}
    for section, (attr, entry_type, text_parser) in SECTION_PARSERS.items():
        raw = data.get(section)
        try:
            entries = sanitize_section(raw, entry_type, text_parser)
        except Exception as e:
            logger.warning(f"[ResponseParser] Could not parse section {section}: {e}")
            entries = ()
        values[attr] = entries
        if entries:
            status[section] = SECTION_PARSED
        elif _has_content(raw):
            status[section] = SECTION_UNPARSED
        else:
            status[section] = SECTION_ABSENT

    degraded = [name for name, state in status.items() if state == SECTION_UNPARSED]
    if degraded:
        logger.warning("[ResponseParser] Sections returned content that matched no record format",
                       extra={"sections": ",".join(degraded)})

    return GeneratedResume(
        header=parse_header(data.get("header")),
        summary=coerce_text(first_present(data, SUMMARY_KEYS), "\n"),
        skills=format_skills(data.get("skills")),
        technical_tools=format_skills(data.get("technicalTools")),
        interests=format_skills(data.get("interests")),
        latex_code=coerce_text(data.get("latexCode"), "\n"),
        section_status=status,
        **values,
    )


def parse(raw_model_output: Any) -> GeneratedResume:
    """
    Turn raw model output (a mapping or a JSON string) into a GeneratedResume.

    Never raises. Output that holds no JSON object yields an empty resume with
    every section marked unparsed; missing output marks them absent.
    """
    if isinstance(raw_model_output, Mapping):
        return parse_mapping(raw_model_output)
    if not isinstance(raw_model_output, str) or not raw_model_output.strip():
        return _unparsed_resume(SECTION_ABSENT)
    try:
        data = extract_json_object(raw_model_output)
    except GenerationFailed as e:
        logger.warning(f"[ResponseParser] {e.message}", extra={"excerpt": e.details.get("excerpt", "")})
        return _unparsed_resume(SECTION_UNPARSED)
    return parse_mapping(data)


# ============================================================================
# SERIALIZATION BACK INTO THE RECORD CONVENTION
# ============================================================================

def _with_bullets(header: str, description: str) -> str:
    lines = [header] + [f"{BULLET} {line}" for line in bullet_lines(description)]
    return "\n".join(lines)


def _join_records(records: List[str]) -> str:
    return "\n\n".join(records)


def serialize_sections(resume: GeneratedResume) -> Dict[str, Any]:
    """Write a GeneratedResume back into the model's output convention."""
    return {
        "header": resume.header.to_dict(),
        "summary": resume.summary,
        "skills": resume.skills,
        "technicalTools": resume.technical_tools,
        "experience": _join_records([
            _with_bullets(f"**{e.role}** | {e.company} | {e.duration}", e.description)
            for e in resume.experience]),
        "education": _join_records([
            f"**{e.degree}** | {e.university} | {e.year or e.duration}" for e in resume.education]),
        "projects": _join_records([
            _with_bullets(f"**{p.title}** | Technologies: {p.tech}" if p.tech else f"**{p.title}**",
                          p.description)
            for p in resume.projects]),
        "certifications": _join_records([
            f"**{c.title}** | {c.issuer}" if c.issuer else f"**{c.title}**" for c in resume.certifications]),
        "languages": _join_records([
            f"**{lang.language}** | {lang.proficiency}" if lang.proficiency else f"**{lang.language}**"
            for lang in resume.languages]),
        "volunteerWork": _join_records([
            _with_bullets(f"**{v.role}** | {v.organization} | {v.duration}", v.description)
            for v in resume.volunteer_work]),
        "publications": _join_records([
            f"**{p.title}** | {p.publication} | {p.date}" for p in resume.publications]),
        "awards": _join_records([
            f"**{a.title}** | {a.organization} | {a.date}" for a in resume.awards]),
        "interests": resume.interests,
        "latexCode": resume.latex_code,
    }
