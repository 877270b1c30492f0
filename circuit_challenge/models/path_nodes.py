from sqlalchemy import Column, Integer, ForeignKey, String
from sqlalchemy.orm import relationship
from circuit_challenge.core.database import Base

class PathNode(Base):
    __tablename__ = "path_nodes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    puzzle_id = Column(String(36), ForeignKey("puzzles.id", ondelete="CASCADE"), nullable=False)
    order_index = Column(Integer, nullable=False) # position on the solution path, START is 0
    row = Column(Integer, nullable=False)
    col = Column(Integer, nullable=False)

    # Relationship
    puzzle = relationship("Puzzle", back_populates="path_nodes")
