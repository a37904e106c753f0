"""
Pure resume formatters: HTML, plain text, LaTeX and the standard 10-section format
"""
from jobassist.services.formatters.html_formatter import to_html
from jobassist.services.formatters.latex_formatter import escape_latex, to_latex
from jobassist.services.formatters.text_formatter import to_plain_text

__all__ = ['to_html', 'to_plain_text', 'to_latex', 'escape_latex']
