"""Initial schema.

Revision ID: 001
Revises:
Create Date: 2026-01-01 00:00:00.000000
"""

import sqlalchemy as sa

from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None

GENRES = (
    "FICTION",
    "NON_FICTION",
    "MYSTERY",
    "ROMANCE",
    "SCIENCE_FICTION",
    "FANTASY",
    "BIOGRAPHY",
    "HISTORY",
    "SELF_HELP",
    "BUSINESS",
    "TECHNOLOGY",
    "HEALTH",
    "COOKING",
    "TRAVEL",
    "CHILDREN",
)


def _genre_column() -> sa.Column:
    return sa.Column(
        "genre",
        sa.Enum(*GENRES, name="genre_enum", native_enum=False, length=32),
        primary_key=True,
    )


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("bio", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )

    # Books
    op.create_table(
        "books",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(500), nullable=False, index=True),
        sa.Column("author", sa.String(300), nullable=False, index=True),
        sa.Column("isbn", sa.String(20), unique=True, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("cover_image_url", sa.String(1000), nullable=True),
        sa.Column("published_year", sa.Integer, nullable=True),
        sa.Column("average_rating", sa.Numeric(3, 2), nullable=False, server_default="0"),
        sa.Column("total_reviews", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index("ix_books_rating", "books", ["average_rating", "total_reviews"])

    # Genres (book tags and user preferences)
    op.create_table(
        "book_genres",
        sa.Column(
            "book_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("books.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        _genre_column(),
    )
    op.create_index("ix_book_genres_genre", "book_genres", ["genre"])

    op.create_table(
        "user_preferred_genres",
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        _genre_column(),
    )

    # Favorites
    op.create_table(
        "user_favorite_books",
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "book_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("books.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )

    # Reviews: one per user per book
    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "book_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("books.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("text", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "book_id", name="uq_review_user_book"),
    )
    op.create_index("ix_reviews_user", "reviews", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_reviews_user", table_name="reviews")
    op.drop_table("reviews")
    op.drop_table("user_favorite_books")
    op.drop_table("user_preferred_genres")
    op.drop_index("ix_book_genres_genre", table_name="book_genres")
    op.drop_table("book_genres")
    op.drop_index("ix_books_rating", table_name="books")
    op.drop_table("books")
    op.drop_table("users")
