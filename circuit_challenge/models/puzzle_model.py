from sqlalchemy import Column, Integer, String, func, DateTime
from sqlalchemy.orm import relationship
from circuit_challenge.core.database import Base


class Puzzle(Base):
    __tablename__ = "puzzles"

    id = Column(String(36), primary_key=True) # same id as the generated puzzle
    name = Column(String, nullable=False)
    difficulty = Column(Integer, nullable=False) # preset level, 0 for custom
    grid_rows = Column(Integer, nullable=False)
    grid_cols = Column(Integer, nullable=False)
    steps = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # relationship
    cells = relationship("Cell", back_populates="puzzle", cascade="all, delete-orphan")
    connectors = relationship("Connector", back_populates="puzzle", cascade="all, delete-orphan")
    path_nodes = relationship(
        "PathNode", back_populates="puzzle", cascade="all, delete-orphan", order_by="PathNode.order_index"
    )
