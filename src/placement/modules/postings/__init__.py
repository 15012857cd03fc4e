"""
Postings Module

Job postings published by organizations and reviewed by administrators.
"""

from placement.modules.postings.models import Posting, PostingStatus

__all__ = ["Posting", "PostingStatus"]
