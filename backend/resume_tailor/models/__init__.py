from resume_tailor.models.user import User, LoginLink
from resume_tailor.models.job import Job
from resume_tailor.models.generation import ResumeGeneration

__all__ = ["User", "LoginLink", "Job", "ResumeGeneration"]
