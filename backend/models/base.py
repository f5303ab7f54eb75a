from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.auth import utcnow, new_id


class Analysis(Base):
    __tablename__ = "analyses"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    document_name = Column(String(255), nullable=False)
    document_text = Column(Text, nullable=False)
    # JSON-serialized requirements blob, kept verbatim
    requirements = Column(Text, nullable=False)

    user = relationship("User", back_populates="analyses")
    share_link = relationship("ShareLink", back_populates="analysis", uselist=False,
                              cascade="all, delete-orphan")


class ShareLink(Base):
    __tablename__ = "share_links"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime, default=utcnow)
    analysis_id = Column(String(36), ForeignKey("analyses.id"), unique=True, nullable=False)
    token = Column(String(255), unique=True, index=True, nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime, nullable=True)

    analysis = relationship("Analysis", back_populates="share_link")


class ContactRequest(Base):
    __tablename__ = "contact_requests"

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(DateTime, default=utcnow)
    name = Column(String(255), nullable=False)
    email = Column(String(255), index=True, nullable=False)
    company = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    plan_name = Column(String(50), nullable=True)
