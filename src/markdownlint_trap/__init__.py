"""markdownlint-trap: prose and link checks for Markdown with confidence-gated autofixes."""
__version__ = "1.0.0"
