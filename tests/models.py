"""Database models for RowQL tests (shared)."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, false, text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for test models."""
    pass


class User(Base):
    """Application users (docstring)"""
    __tablename__ = 'users'
    __table_args__ = {'comment': 'Application users'}

    id = Column(Integer, primary_key=True, comment='User primary key')
    name = Column(String(100), nullable=False, comment='Public display name')
    email = Column(String(255), unique=True, nullable=False)
    nickname = Column(String(50), nullable=True)
    is_admin = Column(Boolean, nullable=False, server_default=false())
    score = Column(Integer, nullable=False, server_default=text('10'))
    # Python-side default: not applied by raw SQL inserts
    bio = Column(String(200), nullable=True, default='n/a')


class Membership(Base):
    """Composite primary key: (group_name, user_id) in declaration order."""
    __tablename__ = 'memberships'

    group_name = Column(String(50), primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), primary_key=True)
    role = Column(String(20), nullable=False, server_default=text("'member'"))
