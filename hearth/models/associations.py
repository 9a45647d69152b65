"""
Association tables for many-to-many relationships.
Kept separate to avoid circular imports between models.
"""
from sqlalchemy import Column, Table, ForeignKey, String, DateTime, func
from hearth.models.base import Base

task_tags = Table(
    'task_tags',
    Base.metadata,
    Column('task_id', String(36), ForeignKey('tasks.id', ondelete='CASCADE'), primary_key=True),
    Column('tag_id', String(36), ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True, index=True),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False)
)
