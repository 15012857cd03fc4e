"""Admin Schemas"""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Aggregated counts for the admin dashboard."""

    total_applicants: int
    total_organizations: int
    total_postings: int
    total_applications: int
    pending_applicants: int
    pending_organizations: int
    blocked_applicants: int
    blocked_organizations: int
    pending_postings: int
    active_postings: int
    selected_applications: int
