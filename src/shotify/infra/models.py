from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, JSON, String, UniqueConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

Base = declarative_base()


class GameModel(Base):
    """
    One saved game per (owner, video). `video_id` is the original YouTube id,
    `internal_id` the owner-specific key the stat rows hang off.
    """
    __tablename__ = 'games'
    __table_args__ = (
        UniqueConstraint('video_id', 'created_by', name='video_id_created_by_unique'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    internal_id = Column(String, unique=True, nullable=False, index=True)
    video_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    teams = Column(JSON, nullable=False)
    total_stats = Column(Integer, default=0)
    share_id = Column(String, unique=True, nullable=True, index=True)
    is_shared = Column(Boolean, default=False, index=True)
    created_by = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, index=True)

    stats = relationship(
        "GameStatModel",
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GameStatModel.id",
    )

    def __repr__(self):
        return (f"<GameModel(internal_id='{self.internal_id}', "
                f"video_id='{self.video_id}', created_by='{self.created_by}')>")


class GameStatModel(Base):
    """One GameEvent of a saved game."""
    __tablename__ = 'game_stats'

    id = Column(Integer, primary_key=True, autoincrement=True)
    game_internal_id = Column(
        String, ForeignKey('games.internal_id', ondelete='CASCADE'), nullable=False, index=True
    )
    type = Column(String, nullable=False)
    value = Column(Integer, default=1)
    player = Column(String)
    team = Column(String)
    timestamp = Column(Float, default=0.0)
    formatted_time = Column(String)
    created_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    game = relationship("GameModel", back_populates="stats")


class SeasonModel(Base):
    __tablename__ = 'seasons'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    game_ids = Column(JSON, nullable=False)   # original video ids
    created_by = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)
