from models.base_model import Base, BaseModel
from sqlalchemy import Boolean, Column, ForeignKey, String
from sqlalchemy.orm import relationship


class Todo(BaseModel, Base):
    __tablename__ = "todos"

    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    completed = Column(Boolean, nullable=False, default=False)

    owner = relationship("User", back_populates="todos")
