"""
HRMS - HR record-keeping system

Candidate and employee records with their stored attachments (resumes/CVs).

Architecture:
- Records Context: Read-only access to people and their attachments
- Export Context: Batch export of CV attachments into a single zip archive
"""

__version__ = "0.1.0"
