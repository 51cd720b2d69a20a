from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from resume_tailor.database import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    document_job_description_id = Column(Text, nullable=False)
    job_title = Column(Text, nullable=False)
    company_name = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)

    user = relationship("User", back_populates="jobs")
    generations = relationship("ResumeGeneration", back_populates="job", cascade="all, delete-orphan")
