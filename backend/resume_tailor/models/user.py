from sqlalchemy import Column, Float, Text
from sqlalchemy.orm import relationship
from resume_tailor.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    created_at = Column(Text, nullable=False)

    jobs = relationship("Job", back_populates="user", cascade="all, delete-orphan")


class LoginLink(Base):
    __tablename__ = "login_links"

    email = Column(Text, primary_key=True)
    token_hash = Column(Text, nullable=False)
    expires_at = Column(Float, nullable=False)
