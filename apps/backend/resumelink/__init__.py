"""ResumeLink: short shareable links for PDF resumes, with view/download analytics."""

__version__ = "0.1.0"
