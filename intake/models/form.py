from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from intake.database import Base


class Form(Base):
    __tablename__ = "forms"

    id = Column(Integer, primary_key=True, index=True)
    # One submission per account
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    full_name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    education = Column(String, nullable=False)
    address = Column(Text, nullable=False)
    father_name = Column(String, nullable=False)
    mother_name = Column(String, nullable=False)

    # Stored file names inside the upload folder
    nrc_file = Column(String, nullable=False)
    household_file = Column(String, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="form")
