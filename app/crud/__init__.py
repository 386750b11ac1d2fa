"""
CRUD operations (Create, Read, Update, Delete) for the Jobly entities.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern. Every module exposes create, find_all, get,
update and remove; user adds authenticate and apply_to_job.
"""

from app.crud import company, job, user

__all__ = ["company", "job", "user"]
