"""
JobAssist - resume generation and formatting pipeline
"""
__version__ = "1.0.0"
