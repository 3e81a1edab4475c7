"""
Database Models Module

Defines SQLAlchemy ORM models for the application.
All models inherit from Base defined in database.py.

Models:
    - User: Account with point aggregates
    - Word: Dictionary entry keyed by canonical key
    - WordVote: One vote slot per (word, user)
    - Contribution: Append-only points ledger
    - Flag: User report about a wrong entry
    - SearchLog: One row per validated search
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Text, Float, Boolean, JSON,
    Index, text,
)
from sqlalchemy.orm import relationship
from typing import Any, Dict

from .database import Base
from utils.timestamps import now


class User(Base):
    """
    User model representing an application user.

    Only the point/quota aggregates matter to the dictionary core; they are
    maintained alongside the contribution ledger and can be recomputed from
    it (see services.points.ledger.reconcile_user_aggregates).

    Attributes:
        id: Primary key
        email: Unique email address (used for login)
        password_hash: Bcrypt hashed password
        display_name: Public name on leaderboards
        photo_url: Avatar URL
        total_points: Running total of awarded points
        daily_points: Points awarded today
        words_discovered: Number of discoveries credited
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Authentication
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Profile
    display_name = Column(String(100), nullable=True)
    photo_url = Column(String(2048), nullable=True)

    # Aggregates
    total_points = Column(Float, nullable=False, default=0.0, server_default="0", index=True)
    daily_points = Column(Float, nullable=False, default=0.0, server_default="0")
    words_discovered = Column(Integer, nullable=False, default=0, server_default="0")

    # Timestamps
    created_at = Column(DateTime, default=now, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    contributions = relationship(
        "Contribution",
        back_populates="user",
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"

    @property
    def public_name(self) -> str:
        return self.display_name or "Utilizator"


class Word(Base):
    """
    Dictionary entry.

    The primary key is the canonical key (normalized, diacritic-free,
    hyphenated). Counters are only changed through atomic UPDATE statements
    issued by the vote engine.
    """

    __tablename__ = "words"

    id = Column(String(100), primary_key=True)
    lemma = Column(String(100), nullable=False)
    display = Column(String(100), nullable=False)
    part_of_speech = Column(String(20), nullable=False)

    # Content
    definitions = Column(JSON, nullable=False, default=list)
    examples = Column(JSON, nullable=False, default=list)
    synonyms = Column(JSON, nullable=False, default=list)
    antonyms = Column(JSON, nullable=False, default=list)
    related_words = Column(JSON, nullable=False, default=list)
    pronunciation = Column(String(200), nullable=False, default="")
    syllables = Column(JSON, nullable=False, default=list)
    etymology = Column(Text, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)

    # Structured grammar
    forms = Column(JSON, nullable=False, default=dict)
    noun_forms = Column(JSON, nullable=True)
    verb_forms = Column(JSON, nullable=True)
    adjective_forms = Column(JSON, nullable=True)

    # Enhanced sections
    translations = Column(JSON, nullable=False, default=list)
    collocations = Column(JSON, nullable=False, default=list)
    usage_notes = Column(JSON, nullable=False, default=list)
    frequency_level = Column(String(20), nullable=True)
    difficulty_level = Column(String(2), nullable=True)

    # Creation metadata
    created_at = Column(DateTime, default=now, nullable=False, index=True)
    created_by = Column(String(10), nullable=False, default="ai")
    created_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    ai_version = Column(String(50), nullable=True)

    # Verification
    verified = Column(Boolean, nullable=False, default=False)
    community_verified = Column(Boolean, nullable=False, default=False)

    # Vote aggregates
    likes_count = Column(Integer, nullable=False, default=0, server_default="0")
    dislikes_count = Column(Integer, nullable=False, default=0, server_default="0")
    validations_count = Column(Integer, nullable=False, default=0, server_default="0")
    errors_count = Column(Integer, nullable=False, default=0, server_default="0")

    # Regeneration tracking
    last_regenerated_at = Column(DateTime, nullable=True)
    regeneration_count = Column(Integer, nullable=False, default=0, server_default="0")

    def __repr__(self) -> str:
        return f"<Word(id='{self.id}', display='{self.display}')>"

    @property
    def vote_counts(self) -> Dict[str, int]:
        return {
            "likes": self.likes_count or 0,
            "dislikes": self.dislikes_count or 0,
            "validations": self.validations_count or 0,
            "errors": self.errors_count or 0,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase shape the web client consumes."""
        data = {
            "id": self.id,
            "lemma": self.lemma,
            "display": self.display,
            "partOfSpeech": self.part_of_speech,
            "definitions": self.definitions or [],
            "examples": self.examples or [],
            "synonyms": self.synonyms or [],
            "antonyms": self.antonyms or [],
            "relatedWords": self.related_words or [],
            "pronunciation": self.pronunciation,
            "syllables": self.syllables or [],
            "etymology": self.etymology,
            "tags": self.tags or [],
            "forms": self.forms or {},
            "translations": self.translations or [],
            "collocations": self.collocations or [],
            "usageNotes": self.usage_notes or [],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "createdBy": self.created_by,
            "createdByUserId": self.created_by_user_id,
            "verified": bool(self.verified),
            "communityVerified": bool(self.community_verified),
            "aiVersion": self.ai_version,
            "likesCount": self.likes_count or 0,
            "dislikesCount": self.dislikes_count or 0,
            "validationsCount": self.validations_count or 0,
            "errorsCount": self.errors_count or 0,
            "regenerationCount": self.regeneration_count or 0,
        }

        # Optional sections are omitted rather than sent as null
        optional = {
            "nounForms": self.noun_forms,
            "verbForms": self.verb_forms,
            "adjectiveForms": self.adjective_forms,
            "frequencyLevel": self.frequency_level,
            "difficultyLevel": self.difficulty_level,
            "lastRegeneratedAt": self.last_regenerated_at.isoformat() if self.last_regenerated_at else None,
        }
        data.update({key: value for key, value in optional.items() if value})
        return data


class WordVote(Base):
    """
    A user's vote on a word.

    The (word_id, user_id) composite primary key enforces at most one active
    vote per user per word.
    """

    __tablename__ = "word_votes"

    word_id = Column(String(100), ForeignKey("words.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    vote_type = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=now, nullable=False)
    updated_at = Column(DateTime, default=now, nullable=False)

    def __repr__(self) -> str:
        return f"<WordVote(word_id='{self.word_id}', user_id={self.user_id}, vote_type='{self.vote_type}')>"


class Contribution(Base):
    """
    Append-only ledger of point-earning actions.

    Source of truth for quota and duplicate-discovery checks and for
    recomputing user aggregates.
    """

    __tablename__ = "contributions"
    __table_args__ = (
        Index("ix_contributions_user_type_created", "user_id", "type", "created_at"),
        # A user can be credited for discovering a given word only once
        Index(
            "uq_contributions_discovery",
            "user_id",
            "word_id",
            unique=True,
            sqlite_where=text("type = 'discovery'"),
            postgresql_where=text("type = 'discovery'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    word_id = Column(String(100), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    points = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, default=now, nullable=False, index=True)
    data = Column(JSON, nullable=False, default=dict)

    user = relationship("User", back_populates="contributions")

    def __repr__(self) -> str:
        return f"<Contribution(id={self.id}, user_id={self.user_id}, type='{self.type}', word_id='{self.word_id}')>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "wordId": self.word_id,
            "type": self.type,
            "points": self.points,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "data": self.data or {},
        }


class Flag(Base):
    """User report that an entry is wrong."""

    __tablename__ = "flags"

    id = Column(Integer, primary_key=True, index=True)
    word_id = Column(String(100), ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    reason = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="open", index=True)
    created_at = Column(DateTime, default=now, nullable=False)
    resolved_at = Column(DateTime, nullable=True)
    resolved_by = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Flag(id={self.id}, word_id='{self.word_id}', status='{self.status}')>"


class SearchLog(Base):
    """One row per validated search, found or not."""

    __tablename__ = "search_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    term = Column(String(100), nullable=False)
    normalized_term = Column(String(100), nullable=False, index=True)
    found = Column(Boolean, nullable=False, default=False)
    word_id = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=now, nullable=False, index=True)
