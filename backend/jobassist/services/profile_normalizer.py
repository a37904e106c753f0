"""
Profile Normalizer - turn any stored profile document into a NormalizedProfile.

Stored profiles come from several form versions and imports, so the same data
shows up under different field names, as Firestore maps instead of arrays, or
as free text pasted into a single field. Each collection is recovered by trying
a fixed list of extraction strategies in order (structured records, map
encoding, text heuristics, empty default); the first one that yields a result
wins. Field names are resolved through one alias table.

normalize() never raises. Anything that cannot be coerced becomes "" or ().
"""
import logging
import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from jobassist.models.profile import (
    AwardEntry,
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    LanguageEntry,
    NormalizedProfile,
    ProjectEntry,
    PublicationEntry,
    VolunteerEntry,
    is_identified,
)

logger = logging.getLogger(__name__)

MAX_DEPTH = 12

# ============================================================================
# ALIAS TABLE
# ============================================================================

SCALAR_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("name", "fullName", "displayName"),
    "email": ("email", "emailAddress"),
    "phone": ("phone", "phoneNumber", "mobileNumber"),
    "linkedin": ("linkedin", "linkedinURL", "linkedinProfile"),
    "github": ("github", "githubURL", "githubProfile"),
    "portfolio_url": ("portfolioURL", "portfolio", "website"),
    "address": ("address", "streetAddress"),
    "location": ("location", "city", "currentLocation"),
    "gender": ("gender",),
    "date_of_birth": ("dateOfBirth", "dob", "birthDate"),
    "citizenship": ("citizenship", "country", "nationality"),
    "total_experience": ("totalExperience", "yearsOfExperience", "experienceYears"),
    "visa_status": ("visaStatus", "visa"),
    "sponsorship": ("sponsorship", "workAuthorization"),
    "interests": ("interests", "hobbies", "personalInterests"),
    "extra_requirements": ("extraRequirements", "jobDescription"),
    "extra_info": ("extraInfo", "additionalInfo"),
}

COLLECTION_ALIASES: Dict[str, Tuple[str, ...]] = {
    "experience": ("experience", "workExperience", "jobHistory", "employmentHistory",
                   "professionalExperience"),
    "education": ("education", "educationalBackground", "academics", "degrees", "qualifications"),
    "projects": ("projects", "workProjects", "caseStudies", "personalProjects"),
    "certifications": ("certifications", "licenses", "credentials"),
    "languages": ("languages", "languagesSpoken", "knownLanguages", "fluency"),
    "technical_tools": ("technicalTools", "tools", "software", "platforms", "technologies"),
    "volunteer_work": ("volunteerWork", "volunteer", "volunteering", "communityService"),
    "publications": ("publications", "articles", "papers", "writtenWork"),
    "awards": ("awards", "honors", "recognition", "achievements"),
    "skills": ("skills", "keySkills", "technicalSkills", "coreSkills", "skillsArray", "expertise"),
    "desired_roles": ("desiredRoles", "preferredRoles", "targetRoles"),
}

ENTRY_ALIASES: Dict[type, Dict[str, Tuple[str, ...]]] = {
    ExperienceEntry: {
        "company": ("company", "companyName", "organization", "employer"),
        "role": ("role", "position", "jobTitle", "title"),
        "duration": ("duration", "period", "tenure", "dates", "timeline"),
        "description": ("description", "details", "responsibilities", "achievements"),
    },
    EducationEntry: {
        "degree": ("degree", "degreeType", "qualification", "course"),
        "university": ("university", "school", "institution", "college", "schoolName"),
        "year": ("year", "graduationYear", "passingYear", "date"),
        "duration": ("duration", "period", "tenure"),
    },
    ProjectEntry: {
        "title": ("title", "name", "projectName"),
        "tech": ("tech", "technologies", "techStack", "stack", "tools"),
        "description": ("description", "details", "summary"),
    },
    CertificationEntry: {
        "title": ("title", "name", "certification", "certificate"),
        "issuer": ("issuer", "issuedBy", "organization", "authority", "provider"),
    },
    LanguageEntry: {
        "language": ("language", "name"),
        "proficiency": ("proficiency", "level", "fluency"),
    },
    VolunteerEntry: {
        "role": ("role", "position", "title"),
        "organization": ("organization", "organisation", "company", "cause"),
        "duration": ("duration", "period", "tenure", "dates"),
        "description": ("description", "details", "responsibilities"),
    },
    PublicationEntry: {
        "title": ("title", "name"),
        "publication": ("publication", "publisher", "journal", "venue"),
        "date": ("date", "year", "publishedDate"),
    },
    AwardEntry: {
        "title": ("title", "name", "award"),
        "organization": ("organization", "issuer", "awardedBy", "presenter"),
        "date": ("date", "year"),
    },
}

# Fields whose list values join with newlines rather than commas
_MULTILINE_FIELDS = {"description"}

# Start/end keys combined into a duration when no duration field exists
_RANGE_KEYS = (("startDate", "endDate"), ("from", "to"), ("start", "end"))

# ============================================================================
# PATTERNS
# ============================================================================

_MONTH = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?"
DATE_RANGE_RE = re.compile(
    rf"((?:{_MONTH}\s+)?\d{{4}}\s*(?:-|–|—|\bto\b)\s*"
    rf"(?:(?:{_MONTH}\s+)?\d{{4}}|Present|Now|Current|Ongoing|Till Date))",
    re.IGNORECASE,
)
YEAR_RE = re.compile(r"\b((?:19|20)\d{2})\b")
AT_RE = re.compile(r"^(.+?)\s+(?:at|@)\s+(.+)$", re.IGNORECASE)
ISSUED_BY_RE = re.compile(r"^(.+?)\s+(?:issued by|from|by)\s+(.+)$", re.IGNORECASE)
DASH_SPLIT_RE = re.compile(r"\s+[-–—]\s+")
PAREN_RE = re.compile(r"^(.+?)\s*\((.+?)\)\s*$")
DEGREE_RE = re.compile(
    r"\b(Bachelor|Master|Doctor|Diploma|Associate|Ph\.?\s?D|M\.?B\.?A|B\.?\s?Tech|M\.?\s?Tech|"
    r"B\.?\s?Sc|M\.?\s?Sc|B\.?\s?Com|M\.?\s?Com|BCA|MCA|B\.E|M\.E|B\.S|M\.S|B\.A|M\.A|"
    r"High School|Secondary|Intermediate)",
    re.IGNORECASE,
)
TECH_LINE_RE = re.compile(r"^(?:tech(?:nologies|nology| stack)?|stack|tools|built with)\s*:\s*(.+)$",
                          re.IGNORECASE)
BULLET_RE = re.compile(r"^\s*(?:[•▪●◦‣∙·]|[-–*](?!\*))\s*")
BLANK_LINE_RE = re.compile(r"\n\s*\n")
LIST_SPLIT_RE = re.compile(r"[\n;,]")
_EDGE_PUNCT = " \t|,;:-–—"


# ============================================================================
# PLAIN-DATA CONVERSION
# ============================================================================

def to_plain(value: Any, _depth: int = 0) -> Any:
    """
    Convert Firestore values into plain Python data.

    Snapshots and model objects become dicts, timestamps become ISO strings,
    GeoPoints become "lat, lng", references become their path. Nesting deeper
    than MAX_DEPTH is cut off.
    """
    if _depth > MAX_DEPTH:
        return None
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): to_plain(v, _depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_plain(v, _depth + 1) for v in value]
    if isinstance(value, bytes):
        return None
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_plain(to_dict(), _depth + 1)
    if hasattr(value, "latitude") and hasattr(value, "longitude"):
        return f"{value.latitude}, {value.longitude}"
    if hasattr(value, "path") and hasattr(value, "id"):
        return str(value.path)
    return str(value)


# ============================================================================
# GENERIC LOOKUP AND COERCION
# ============================================================================

def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


def first_present(mapping: Mapping, aliases: Iterable[str]) -> Any:
    """Return the value of the first alias that holds non-empty data, else None."""
    if not isinstance(mapping, Mapping):
        return None
    for alias in aliases:
        value = mapping.get(alias)
        if _is_present(value):
            return value
    return None


def coerce_text(value: Any, joiner: str = ", ") -> str:
    """Coerce a scalar-ish value to a trimmed string; lists join, mappings are dropped."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        parts = [coerce_text(v, joiner) for v in value if not isinstance(v, (dict, list, tuple))]
        return joiner.join(p for p in parts if p)
    return ""


def strip_markup(line: str) -> str:
    """Remove bullet markers, bold markers and surrounding separators from a line."""
    line = BULLET_RE.sub("", line or "")
    line = line.replace("**", "")
    return line.strip(_EDGE_PUNCT)


def clean_line(line: str) -> str:
    """Remove a leading bullet and bold markers, keeping the rest of the text intact."""
    return BULLET_RE.sub("", line or "").replace("**", "").strip()


def _is_bullet(line: str) -> bool:
    return bool(BULLET_RE.match(line or ""))


# ============================================================================
# RECORD MAPPING (STRATEGY 1 AND 2)
# ============================================================================

def _has_recognized_key(item: Mapping, entry_type: type) -> bool:
    aliases = ENTRY_ALIASES[entry_type]
    return any(alias in item for names in aliases.values() for alias in names)


def _compose_range(item: Mapping) -> str:
    for start_key, end_key in _RANGE_KEYS:
        start = coerce_text(item.get(start_key))
        end = coerce_text(item.get(end_key))
        if start or end:
            return f"{start} - {end or 'Present'}" if start else end
    return ""


def map_record(item: Mapping, entry_type: type):
    """Map one dict onto entry_type through ENTRY_ALIASES. Returns None when unidentified."""
    values = {}
    for field_name, aliases in ENTRY_ALIASES[entry_type].items():
        joiner = "\n" if field_name in _MULTILINE_FIELDS else ", "
        values[field_name] = strip_markup_keep_newlines(coerce_text(first_present(item, aliases), joiner))
    if "duration" in values and not values["duration"]:
        values["duration"] = _compose_range(item)
    entry = entry_type(**values)
    return entry if is_identified(entry) else None


def strip_markup_keep_newlines(text: str) -> str:
    if "\n" not in text:
        return text.replace("**", "").strip()
    lines = [clean_line(line) for line in text.split("\n")]
    return "\n".join(line for line in lines if line)


def from_records(value: Any, entry_type: type, text_parser: Callable[[str], list]) -> Optional[list]:
    """Strategy 1: a list of records. Dict items are mapped, string items are text-parsed."""
    if not isinstance(value, (list, tuple)):
        return None
    entries = []
    for item in value:
        if isinstance(item, Mapping):
            if not _has_recognized_key(item, entry_type):
                continue
            entry = map_record(item, entry_type)
            if entry is not None:
                entries.append(entry)
        elif isinstance(item, str):
            entries.extend(text_parser(item))
    return entries


def from_mapping(value: Any, entry_type: type, text_parser: Callable[[str], list]) -> Optional[list]:
    """Strategy 2: a Firestore map standing in for a list, or a single stray record."""
    if not isinstance(value, Mapping):
        return None
    if _has_recognized_key(value, entry_type):
        entry = map_record(value, entry_type)
        return [entry] if entry is not None else []
    return from_records(list(value.values()), entry_type, text_parser)


def from_text(value: Any, text_parser: Callable[[str], list]) -> Optional[list]:
    """Strategy 3: free text pasted into the field."""
    if not isinstance(value, str):
        return None
    return text_parser(value)


def extract_collection(value: Any, entry_type: type, text_parser: Callable[[str], list]) -> Tuple:
    """Run the strategies in order; the first one that applies wins."""
    for strategy in (
        lambda v: from_records(v, entry_type, text_parser),
        lambda v: from_mapping(v, entry_type, text_parser),
        lambda v: from_text(v, text_parser),
    ):
        result = strategy(value)
        if result is not None:
            return tuple(e for e in result if e is not None and is_identified(e))
    return ()


# ============================================================================
# TEXT HEURISTICS (STRATEGY 3)
# ============================================================================

def split_records(text: str, is_header: Optional[Callable[[str], bool]] = None) -> List[List[str]]:
    """
    Split free text into records.

    Blank lines always separate records. Inside a block a new record starts at a
    line opening with `**`, or at a header-looking line when the current record
    also began with one.
    """
    records: List[List[str]] = []
    for block in BLANK_LINE_RE.split(text.replace("\r\n", "\n")):
        current: List[str] = []
        for raw_line in block.split("\n"):
            line = raw_line.strip()
            if not line:
                continue
            starts_new = bool(current) and (
                line.startswith("**")
                or (is_header is not None and not _is_bullet(line)
                    and is_header(line) and is_header(current[0]))
            )
            if starts_new:
                records.append(current)
                current = []
            current.append(line)
        if current:
            records.append(current)
    return records


def _pop_date_range(text: str) -> Tuple[str, str]:
    """Return (text without its date range, date range)."""
    match = DATE_RANGE_RE.search(text)
    if not match:
        return text, ""
    remaining = (text[:match.start()] + " " + text[match.end():]).strip()
    remaining = re.sub(r"\(\s*\)", "", remaining)
    return remaining.strip(_EDGE_PUNCT), match.group(1).strip()


def _pipe_parts(text: str) -> List[str]:
    return [p.strip() for p in text.split("|") if p.strip()]


def _split_pair(header: str, allow_dash: bool = True) -> Tuple[str, str]:
    """Split a header into (left, right) using pipe, 'at'/'@', dash, then comma."""
    parts = _pipe_parts(header)
    if len(parts) >= 2:
        return parts[0], parts[1]
    match = AT_RE.match(header)
    if match:
        return match.group(1).strip(_EDGE_PUNCT), match.group(2).strip(_EDGE_PUNCT)
    if allow_dash and not YEAR_RE.search(header):
        dash_parts = DASH_SPLIT_RE.split(header, maxsplit=1)
        if len(dash_parts) == 2:
            return dash_parts[0].strip(), dash_parts[1].strip()
    if "," in header:
        left, right = header.split(",", 1)
        return left.strip(), right.strip()
    return header.strip(), ""


def _looks_like_role_header(line: str) -> bool:
    return "|" in line or bool(AT_RE.match(line.replace("**", "")))


def _parse_role_block(lines: List[str]) -> Tuple[str, str, str, str]:
    """Parse a work-style block into (role, organization, duration, description)."""
    header, duration = _pop_date_range(lines[0].replace("**", ""))
    parts = _pipe_parts(header)
    if len(parts) >= 3 and not duration:
        duration = parts[2]
    role, organization = _split_pair(header)
    role, organization = strip_markup(role), strip_markup(organization)

    description = []
    for index, line in enumerate(lines[1:]):
        stripped_line, found_range = _pop_date_range(line.replace("**", ""))
        if found_range and not duration and len(strip_markup(stripped_line)) <= 3:
            duration = found_range
            continue
        if index == 0 and not organization and not _is_bullet(line):
            organization = strip_markup(line)
            continue
        cleaned = clean_line(line)
        if cleaned:
            description.append(cleaned)
    return role, organization, duration, "\n".join(description)


def parse_experience_text(text: str) -> List[ExperienceEntry]:
    entries = []
    for lines in split_records(text, _looks_like_role_header):
        role, company, duration, description = _parse_role_block(lines)
        entries.append(ExperienceEntry(company=company, role=role, duration=duration,
                                       description=description))
    return entries


def parse_volunteer_text(text: str) -> List[VolunteerEntry]:
    entries = []
    for lines in split_records(text, _looks_like_role_header):
        role, organization, duration, description = _parse_role_block(lines)
        entries.append(VolunteerEntry(role=role, organization=organization, duration=duration,
                                      description=description))
    return entries


def parse_education_text(text: str) -> List[EducationEntry]:
    entries = []
    is_header = lambda line: "|" in line or bool(DEGREE_RE.search(line))
    for lines in split_records(text, is_header):
        joined = " | ".join(line.replace("**", "") for line in lines)
        rest, duration = _pop_date_range(joined)
        year = ""
        if not duration:
            years = YEAR_RE.findall(rest)
            year = years[-1] if years else ""
        candidates = []
        for chunk in re.split(r"\s*\|\s*", rest):
            chunk = YEAR_RE.sub("", chunk) if year else chunk
            at_match = AT_RE.match(chunk)
            pieces = [at_match.group(1), at_match.group(2)] if at_match else chunk.split(",")
            for piece in pieces:
                piece = strip_markup(piece)
                if piece:
                    candidates.append(piece)
        degree = next((c for c in candidates if DEGREE_RE.search(c)), candidates[0] if candidates else "")
        university = next((c for c in candidates if c != degree), "")
        entries.append(EducationEntry(degree=degree, university=university, year=year, duration=duration))
    return entries


def parse_project_text(text: str) -> List[ProjectEntry]:
    entries = []
    for lines in split_records(text, lambda line: "|" in line):
        header = lines[0].replace("**", "")
        title, tech, description = "", "", []
        parts = _pipe_parts(header)
        if len(parts) >= 2:
            title = parts[0]
            tech = re.sub(r"^(?:tech(?:nologies)?|stack)\s*:\s*", "", parts[1], flags=re.IGNORECASE)
            description.extend(parts[2:])
        else:
            paren = PAREN_RE.match(header)
            if paren:
                title, tech = paren.group(1), paren.group(2)
            elif ":" in header:
                title, rest = header.split(":", 1)
                description.append(rest)
            else:
                title_part, _, rest = header.partition(" - ")
                title = title_part
                if rest:
                    description.append(rest)
        for line in lines[1:]:
            tech_match = TECH_LINE_RE.match(strip_markup(line))
            if tech_match and not tech:
                tech = tech_match.group(1)
            else:
                description.append(line)
        description = [clean_line(d) for d in description]
        entries.append(ProjectEntry(title=strip_markup(title), tech=strip_markup(tech),
                                    description="\n".join(d for d in description if d)))
    return entries


def _split_items(text: str, separators: str) -> List[str]:
    return [strip_markup(item) for item in re.split(separators, text) if strip_markup(item)]


def parse_certification_text(text: str) -> List[CertificationEntry]:
    entries = []
    for item in _split_items(text, r"[\n;]"):
        parts = _pipe_parts(item)
        if len(parts) >= 2:
            title, issuer = parts[0], parts[1]
        else:
            match = ISSUED_BY_RE.match(item)
            if match:
                title, issuer = match.group(1), match.group(2)
            else:
                dash_parts = DASH_SPLIT_RE.split(item, maxsplit=1)
                title, issuer = (dash_parts + [""])[:2]
        entries.append(CertificationEntry(title=strip_markup(title), issuer=strip_markup(issuer)))
    return entries


def parse_language_text(text: str) -> List[LanguageEntry]:
    entries = []
    for item in _split_items(text, r"[\n;,]"):
        language, proficiency = item, ""
        paren = PAREN_RE.match(item)
        if paren:
            language, proficiency = paren.group(1), paren.group(2)
        elif "|" in item or ":" in item:
            language, _, proficiency = re.split(r"(\||:)", item, maxsplit=1)
        else:
            dash_parts = DASH_SPLIT_RE.split(item, maxsplit=1)
            if len(dash_parts) == 2:
                language, proficiency = dash_parts
        entries.append(LanguageEntry(language=strip_markup(language), proficiency=strip_markup(proficiency)))
    return entries


def _parse_titled_items(text: str) -> List[Tuple[str, str, str]]:
    """Parse 'Title - Source, Date' or 'Title | Source | Date' lines."""
    results = []
    for item in _split_items(text, r"[\n;]"):
        parts = _pipe_parts(item)
        if len(parts) < 2:
            dash_parts = DASH_SPLIT_RE.split(item, maxsplit=1)
            parts = [dash_parts[0]]
            if len(dash_parts) == 2:
                source, _, when = dash_parts[1].rpartition(",")
                if source and YEAR_RE.search(when):
                    parts.extend([source, when])
                else:
                    parts.append(dash_parts[1])
        title, source, when = (parts + ["", ""])[:3]
        if not when:
            year = YEAR_RE.search(title)
            if year and title.strip().endswith(year.group(1)):
                when = year.group(1)
                title = title[:year.start()]
        results.append((strip_markup(title), strip_markup(source), strip_markup(when)))
    return results


def parse_publication_text(text: str) -> List[PublicationEntry]:
    return [PublicationEntry(title=t, publication=s, date=d) for t, s, d in _parse_titled_items(text)]


def parse_award_text(text: str) -> List[AwardEntry]:
    return [AwardEntry(title=t, organization=s, date=d) for t, s, d in _parse_titled_items(text)]


def extract_string_list(value: Any) -> Tuple[str, ...]:
    """Skills, tools and roles: list items, map values, or delimited text."""
    items: List[str] = []
    if isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, Mapping):
                text = coerce_text(first_present(item, ("name", "skill", "value", "title", "label")))
            elif isinstance(item, (list, tuple)):
                items.extend(extract_string_list(item))
                continue
            else:
                text = coerce_text(item)
            text = strip_markup(text)
            if text:
                items.append(text)
    elif isinstance(value, Mapping):
        items.extend(extract_string_list(list(value.values())))
    elif isinstance(value, str):
        items.extend(_split_items(value, LIST_SPLIT_RE.pattern))
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        items.append(coerce_text(value))
    return tuple(items)


# entry type and text parser per record collection
RECORD_COLLECTIONS: Dict[str, Tuple[type, Callable[[str], list]]] = {
    "experience": (ExperienceEntry, parse_experience_text),
    "education": (EducationEntry, parse_education_text),
    "projects": (ProjectEntry, parse_project_text),
    "certifications": (CertificationEntry, parse_certification_text),
    "languages": (LanguageEntry, parse_language_text),
    "volunteer_work": (VolunteerEntry, parse_volunteer_text),
    "publications": (PublicationEntry, parse_publication_text),
    "awards": (AwardEntry, parse_award_text),
}

STRING_COLLECTIONS = ("technical_tools", "skills", "desired_roles")


# ============================================================================
# PUBLIC API
# ============================================================================

def _desired_roles_source(document: Mapping) -> Any:
    value = first_present(document, COLLECTION_ALIASES["desired_roles"])
    if value is None:
        preferences = document.get("jobPreferences")
        if isinstance(preferences, Mapping):
            value = first_present(preferences, COLLECTION_ALIASES["desired_roles"] + ("roles",))
    return value


def normalize(raw_document: Any) -> NormalizedProfile:
    """
    Build a NormalizedProfile from any stored profile document.

    Never raises: an unreadable field becomes its empty value and the rest of
    the profile is still built.
    """
    try:
        document = to_plain(raw_document)
    except Exception as e:
        logger.warning(f"[ProfileNormalizer] Could not read profile document: {e}")
        document = None
    if not isinstance(document, Mapping):
        return NormalizedProfile()

    values: Dict[str, Any] = {}
    for field_name, aliases in SCALAR_ALIASES.items():
        try:
            values[field_name] = coerce_text(first_present(document, aliases))
        except Exception as e:
            logger.warning(f"[ProfileNormalizer] Dropping field {field_name}: {e}")
            values[field_name] = ""

    for field_name, (entry_type, text_parser) in RECORD_COLLECTIONS.items():
        try:
            source = first_present(document, COLLECTION_ALIASES[field_name])
            values[field_name] = extract_collection(source, entry_type, text_parser)
        except Exception as e:
            logger.warning(f"[ProfileNormalizer] Dropping collection {field_name}: {e}")
            values[field_name] = ()

    for field_name in STRING_COLLECTIONS:
        try:
            if field_name == "desired_roles":
                source = _desired_roles_source(document)
            else:
                source = first_present(document, COLLECTION_ALIASES[field_name])
            values[field_name] = extract_string_list(source)
        except Exception as e:
            logger.warning(f"[ProfileNormalizer] Dropping collection {field_name}: {e}")
            values[field_name] = ()

    return NormalizedProfile(**values)


def log_profile_summary(profile: NormalizedProfile, context: str = "") -> Dict[str, Any]:
    """Log section counts for a normalized profile and return them."""
    summary = {
        "has_name": bool(profile.name),
        "has_email": bool(profile.email),
        "has_extra_info": bool(profile.extra_info),
        "has_extra_requirements": bool(profile.extra_requirements),
        **{f"{k}_count": v for k, v in profile.collection_counts().items()},
    }
    logger.info(f"[ProfileNormalizer] Profile data summary {context}".rstrip(), extra=summary)
    return summary


def generate_professional_summary(profile: NormalizedProfile, role: str) -> str:
    """Template summary built only from data present in the profile."""
    key_skills = ", ".join(profile.skills[:3]) or "professional skills"
    role = role or "professional"
    entries = len(profile.experience)

    if entries > 0:
        summary = f"{role} with {entries}+ years of professional background in {key_skills}."
    else:
        summary = f"Motivated {role} with a strong foundation in {key_skills}."

    extra = profile.extra_info[:150].strip()
    if extra:
        summary += f" {extra}"
    elif profile.projects:
        summary += f" Delivered projects including {profile.projects[0].title}."

    lowered = role.lower()
    if "developer" in lowered or "engineer" in lowered:
        summary += " Focused on clean, maintainable code and reliable delivery."
    elif "manager" in lowered or "lead" in lowered:
        summary += " Experienced in coordinating teams toward shared delivery goals."
    elif "designer" in lowered:
        summary += " Attentive to user needs and visual detail."
    elif "analyst" in lowered:
        summary += " Comfortable turning data into clear recommendations."
    return summary
