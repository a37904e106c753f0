"""
Tests for the HTML, plain-text and LaTeX resume formatters
"""
from jobassist.models.profile import AwardEntry, ExperienceEntry
from jobassist.models.resume import FRESHER, GeneratedResume, ResumeHeader
from jobassist.services.formatters import escape_latex, to_html, to_latex, to_plain_text
from jobassist.services.formatters.links import format_url, mailto_url
from jobassist.services.response_parser import parse


class TestHtmlFormatter:
    """Test the preview/PDF document"""

    def test_document_structure(self, model_output):
        """Test a complete document with sections in display order"""
        html = to_html(parse(model_output))
        assert html.startswith("<!DOCTYPE html>")
        assert "<h1>Priya Sharma</h1>" in html
        assert "size: A4" in html
        assert html.index("Professional Summary") < html.index("Work Experience") < html.index("Education")

    def test_bold_becomes_strong(self, model_output):
        """Test **bold** spans render as <strong>"""
        assert "<strong>Python</strong>" in to_html(parse(model_output))

    def test_user_content_is_escaped(self):
        """Test markup in resume content never reaches the page"""
        resume = GeneratedResume(
            header=ResumeHeader(name="<img src=x onerror=alert(1)>"),
            experience=(ExperienceEntry(company="Acme", role="Dev",
                                        description="<script>alert('x')</script>"),),
        )
        html = to_html(resume)
        assert "<script>" not in html
        assert "<img src=x" not in html
        assert "&lt;script&gt;" in html

    def test_empty_sections_omitted(self, model_output):
        """Test sections without data get no heading"""
        html = to_html(parse(model_output))
        assert 'class="section awards"' not in html
        assert "Volunteer Work" not in html

        with_award = to_html(GeneratedResume(awards=(AwardEntry(title="Best Paper"),)))
        assert 'class="section awards"' in with_award

    def test_fresher_objective_and_font_sizes(self):
        """Test fresher resumes get the objective heading and smaller name"""
        html = to_html(GeneratedResume(summary="Eager graduate"), FRESHER)
        assert "Career Objective" in html
        assert "font-size: 16pt" in html


class TestPlainTextFormatter:
    """Test plain-text output"""

    def test_sections(self, model_output):
        """Test headings, bullets and stripped bold markers"""
        text = to_plain_text(parse(model_output))
        assert "PRIYA SHARMA" in text
        assert "WORK EXPERIENCE" in text
        assert "  • Built payment APIs in Flask" in text
        assert "**" not in text
        assert "AWARDS" not in text

    def test_empty_resume(self):
        """Test an empty resume renders without error"""
        assert to_plain_text(GeneratedResume()) == "\n"


class TestLatexFormatter:
    """Test LaTeX output"""

    def test_escaping(self):
        """Test metacharacters are escaped"""
        assert escape_latex("50% & $5_x #1") == r"50\% \& \$5\_x \#1"
        assert escape_latex("a\\b") == r"a\textbackslash{}b"
        assert escape_latex("{x}") == r"\{x\}"

    def test_bold(self):
        """Test bold spans become textbf with escaped contents"""
        assert escape_latex("**C#** rocks") == r"\textbf{C\#} rocks"

    def test_document(self, model_output):
        """Test a complete document with only filled sections"""
        latex = to_latex(parse(model_output))
        assert latex.startswith(r"\documentclass[11pt,a4paper]{article}")
        assert r"\section*{Work Experience}" in latex
        assert r"\item Built payment APIs in Flask" in latex
        assert "Awards" not in latex
        assert latex.rstrip().endswith(r"\end{document}")

    def test_link_cannot_close_href(self):
        """Test braces and backslashes in a profile link stay inside the href target"""
        resume = GeneratedResume(header=ResumeHeader(
            name="Asha", email="a}b@x.com", linkedin="x}\\immediate\\write18{id}\\href{y"))
        latex = to_latex(resume)
        assert r"\href{https://x\%7D\%5Cimmediate\%5Cwrite18\%7Bid\%7D\%5Chref\%7By}{LinkedIn}" in latex
        assert r"\href{mailto:a\%7Db@x.com}{a\}b@x.com}" in latex
        assert r"\immediate\write18{id}" not in latex


class TestLinks:
    """Test link targets shared by the formatters"""

    def test_scheme_added(self):
        """Test links without http(s) get an https prefix"""
        assert format_url("linkedin.com/in/priya") == "https://linkedin.com/in/priya"
        assert format_url("  https://github.com/priya ") == "https://github.com/priya"
        assert format_url("HTTP://example.com") == "HTTP://example.com"
        assert format_url("") == ""

    def test_script_scheme_is_not_a_link(self):
        """Test javascript: targets cannot become live links"""
        assert format_url("javascript:alert(1)") == "https://javascript:alert(1)"

    def test_unsafe_characters_encoded(self):
        """Test quotes, spaces, braces and backslashes are percent-encoded"""
        assert format_url('a" onmouseover="x') == "https://a%22%20onmouseover=%22x"
        assert format_url("x}\\y{") == "https://x%7D%5Cy%7B"

    def test_mailto(self):
        """Test mailto targets"""
        assert mailto_url("a+b@x.com") == "mailto:a+b@x.com"
        assert mailto_url("") == ""

    def test_html_links(self):
        """Test HTML header links go through the shared normalization"""
        html = to_html(GeneratedResume(header=ResumeHeader(
            name="Asha", email="asha@x.com", linkedin="javascript:alert(1)", github="github.com/asha")))
        assert 'href="javascript:' not in html
        assert '<a href="https://javascript:alert(1)">LinkedIn</a>' in html
        assert '<a href="https://github.com/asha">GitHub</a>' in html
        assert '<a href="mailto:asha@x.com">asha@x.com</a>' in html
