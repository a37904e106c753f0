"""
Fixed writing-style instruction blocks included in every generation prompt.
"""

IMPACT_DRIVEN_PRINCIPLES = """
KEY PRINCIPLES:
1. IMPACT-DRIVEN
   - Lead with achievements and outcomes
   - Use metrics and numbers only when they appear in the profile data
   - Highlight the business value of the work

2. ACTION-ORIENTED
   - Start each bullet with a strong action verb (Architected, Delivered, Engineered)
   - Present tense for current roles, past tense for previous roles
   - Avoid passive voice and weak verbs such as "helped" or "worked on"

3. TECHNICAL PRECISION
   - Name the technologies and methods used
   - Match keywords from the target job description
   - Group related languages, tools and frameworks together

4. FORMATTING
   - Use **keyword** syntax to bold technical terms, tools and metrics
""".strip()

BULLET_POINT_FORMULA = """
BULLET POINT FORMULA:
[**Action Verb**] + [Specific Task] + [Using **Technologies**] + [Resulting **Impact**]
Example: "**Engineered** reusable **React** components with **TypeScript**, cutting page load time for the checkout flow"
""".strip()

WORK_EXPERIENCE_PROMPT = f"""
{IMPACT_DRIVEN_PRINCIPLES}

{BULLET_POINT_FORMULA}

INSTRUCTIONS FOR WORK EXPERIENCE:
- Write 3-5 bullets per role
- Focus on accomplishments, not duties
- Technical roles name specific technologies and scale
- Management roles show team size and outcomes
""".strip()

PROJECT_PROMPT = """
INSTRUCTIONS FOR PROJECTS:
- Bold every technology used
- Describe the technical challenge and the solution
- Mention testing, CI/CD or scalability practices when the profile shows them
""".strip()

SUMMARY_PROMPT = """
INSTRUCTIONS FOR SUMMARY:
- 3-4 lines tailored to the target role
- No personal pronouns
- Focus on what the candidate brings to the company
""".strip()

SKILLS_PROMPT = """
INSTRUCTIONS FOR SKILLS:
- Organize skills by category (Languages, Frameworks, Tools)
- Put skills named in the job description first
- Only list skills present in the profile data
""".strip()

ATS_OPTIMIZATION_INSTRUCTIONS = """
ATS OPTIMIZATION PROTOCOL:
1. Map generic terms to the job description's vocabulary
2. Group related skills so keywords appear together
3. Work job keywords naturally into experience bullets
4. Plain text only: no tables, images, columns or colors
""".strip()

CRITICAL_RULES = """
=== CRITICAL RULES ===
1. USE ONLY THE DATA PROVIDED BELOW. DO NOT INVENT, ASSUME, OR ADD ANY INFORMATION.
2. A section marked "No ... data provided" must be returned as an empty string.
3. Never state a number of years of experience that is not in the profile.
4. Use **keyword** syntax inside bullets for technical terms and action verbs.
5. Keep every record on the exact header format shown in the output contract.
6. Separate records with one blank line. Start bullets with "• ".
""".strip()

# Per-section record conventions the response parser understands
SECTION_FORMATS = {
    "experience": "**Role** | Company | Duration, then bullet lines",
    "education": "**Degree** | University | Year",
    "projects": "**Title** | Technologies: Tech1, Tech2, then bullet lines",
    "certifications": "**Certification** | Issuer",
    "languages": "**Language** | Proficiency",
    "volunteerWork": "**Role** | Organization | Duration, then bullet lines",
    "publications": "**Title** | Publication | Date",
    "awards": "**Title** | Organization | Date",
}
