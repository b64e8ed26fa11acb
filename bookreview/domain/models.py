"""SQLAlchemy ORM models."""

import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from bookreview.domain.entities import Genre


class Base(DeclarativeBase):
    pass


genre_enum = Enum(Genre, name="genre_enum", native_enum=False, length=32)

user_favorite_books = Table(
    "user_favorite_books",
    Base.metadata,
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("book_id", Uuid(as_uuid=True), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    bio = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reviews = relationship("Review", back_populates="user")
    preferred_genres = relationship(
        "UserPreferredGenre", cascade="all, delete-orphan", lazy="selectin"
    )
    favorite_books = relationship("Book", secondary=user_favorite_books, lazy="selectin")


class UserPreferredGenre(Base):
    __tablename__ = "user_preferred_genres"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    genre = Column(genre_enum, primary_key=True)


class Book(Base):
    __tablename__ = "books"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(500), nullable=False, index=True)
    author = Column(String(300), nullable=False, index=True)
    isbn = Column(String(20), unique=True, nullable=True)
    description = Column(Text, nullable=True)
    cover_image_url = Column(String(1000), nullable=True)
    published_year = Column(Integer, nullable=True)
    # Denormalized review aggregates
    average_rating = Column(Numeric(3, 2, asdecimal=False), nullable=False, default=0.0)
    total_reviews = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    genres = relationship("BookGenre", cascade="all, delete-orphan", lazy="selectin")
    reviews = relationship("Review", back_populates="book")


class BookGenre(Base):
    __tablename__ = "book_genres"

    book_id = Column(Uuid(as_uuid=True), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    genre = Column(genre_enum, primary_key=True, index=True)


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_review_user_book"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    book_id = Column(Uuid(as_uuid=True), ForeignKey("books.id", ondelete="CASCADE"), nullable=False)
    rating = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="reviews")
    book = relationship("Book", back_populates="reviews")
