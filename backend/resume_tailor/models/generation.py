from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from resume_tailor.database import Base


class ResumeGeneration(Base):
    __tablename__ = "resume_generations"

    id = Column(Text, primary_key=True)
    user_id = Column(Text, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    job_id = Column(Text, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    document_sample_resume_id = Column(Text, nullable=False)
    document_tailored_resume_id = Column(Text, nullable=False)
    match_score = Column(Integer, nullable=False, default=0)
    generation_status = Column(Text, nullable=False, default="completed")
    created_at = Column(Text, nullable=False)

    job = relationship("Job", back_populates="generations")
