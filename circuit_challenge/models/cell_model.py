from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from circuit_challenge.core.database import Base


class Cell(Base):
    __tablename__ = "cells"

    id = Column(Integer, primary_key=True, autoincrement=True)
    row = Column(Integer, nullable=False)
    col = Column(Integer, nullable=False)
    expression = Column(String, nullable=False, default="")
    answer = Column(Integer) # NULL for FINISH
    is_start = Column(Boolean, nullable=False, default=False)
    is_finish = Column(Boolean, nullable=False, default=False)
    puzzle_id = Column(String(36), ForeignKey("puzzles.id", ondelete="CASCADE"), nullable=False)

    # Relationship
    puzzle = relationship("Puzzle", back_populates="cells")
