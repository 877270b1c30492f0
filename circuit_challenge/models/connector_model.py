from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from circuit_challenge.core.database import Base


class Connector(Base):
    __tablename__ = "connectors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    connector_index = Column(Integer, nullable=False) # keeps the generated order
    type = Column(String, nullable=False) # horizontal, vertical, diagonal
    direction = Column(String) # DR or DL for diagonals
    cell_a_row = Column(Integer, nullable=False)
    cell_a_col = Column(Integer, nullable=False)
    cell_b_row = Column(Integer, nullable=False)
    cell_b_col = Column(Integer, nullable=False)
    value = Column(Integer, nullable=False)
    puzzle_id = Column(String(36), ForeignKey("puzzles.id", ondelete="CASCADE"), nullable=False)

    # Relationships
    puzzle = relationship("Puzzle", back_populates="connectors")
