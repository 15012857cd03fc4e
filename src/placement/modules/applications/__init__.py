"""
Applications Module

Applicants' applications to postings, reviewed by the owning organization
or an administrator.
"""

from placement.modules.applications.models import Application, ApplicationStatus

__all__ = ["Application", "ApplicationStatus"]
