
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from docvault.db.session import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(120), nullable=True)
    role = Column(String(50), nullable=False, default="user")
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    documents = relationship("Document", back_populates="owner", passive_deletes="all")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
