from sqlalchemy import Column, String, Date, DateTime, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship

from certtrack.core.database import Base
from certtrack.models.user import generate_uuid, utcnow


class Certification(Base):
    """A professional credential held by one user"""
    __tablename__ = "certifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    # Insertion order, used to break ties in stable sorts
    position = Column(Integer, index=True, nullable=False)

    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)

    name = Column(String(255), nullable=False)
    issuing_organization = Column(String(255), nullable=False)
    issue_date = Column(Date, nullable=False)
    expiration_date = Column(Date, index=True, nullable=False)

    credential_id = Column(String(255), nullable=False, default="")
    certificate_url = Column(Text, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="certifications")

    def __repr__(self):
        return f"<Certification {self.name} (expires {self.expiration_date})>"
