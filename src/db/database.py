from sqlalchemy import create_engine, Column, String, Float, Text, DateTime, Integer, ForeignKey, Table
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from datetime import datetime, timezone
import logging

from src.config import DATABASE_URL

# Get logger
logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow():
    return datetime.now(timezone.utc)


# Ordered Campground -> Comment references. Appending a comment is a single
# INSERT; the unique comment_id keeps each comment under one campground.
campground_comments = Table(
    "campground_comments",
    Base.metadata,
    Column("position", Integer, primary_key=True, autoincrement=True),
    Column("campground_id", String, ForeignKey("campgrounds.id"), nullable=False, index=True),
    Column("comment_id", String, ForeignKey("comments.id"), nullable=False, unique=True),
)


class CommentDB(Base):
    __tablename__ = "comments"
    id = Column(String, primary_key=True, index=True)
    text = Column(Text, nullable=False)
    author_id = Column(String, nullable=False, index=True)
    author_username = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)


# Define the Campground table structure
class CampgroundDB(Base):
    __tablename__ = "campgrounds"
    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=False)
    location = Column(String, nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    author_id = Column(String, nullable=False, index=True)
    author_username = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    comments = relationship(
        CommentDB,
        secondary=campground_comments,
        order_by=campground_comments.c.position,
        viewonly=True,
    )

    @property
    def comment_ids(self):
        return [comment.id for comment in self.comments]


connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables():
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created (if they didn't exist previously).")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
