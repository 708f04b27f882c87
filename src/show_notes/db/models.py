"""SQLAlchemy ORM model for persisted show notes."""

from sqlalchemy import Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class ShowNote(Base):
    """One processed item: metadata, front matter, prompt, transcript, LLM output and costs.

    LLM columns stay NULL when no LLM ran. Cost columns are in dollars.
    """

    __tablename__ = "show_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    show_link = Column(String, nullable=False, default="")
    channel = Column(String, nullable=False, default="")
    channel_url = Column(String, nullable=False, default="")
    title = Column(String, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    publish_date = Column(String(10), nullable=False, default="", index=True)
    cover_image = Column(String, nullable=False, default="")
    frontmatter = Column(Text, nullable=False, default="")
    prompt = Column(Text, nullable=False, default="")
    transcript = Column(Text, nullable=False, default="")
    llm_output = Column(Text, nullable=False, default="")

    llm_service = Column(String, nullable=True)
    llm_model = Column(String, nullable=True)
    llm_cost = Column(Float, nullable=True)
    transcription_service = Column(String, nullable=True)
    transcription_model = Column(String, nullable=True)
    transcription_cost = Column(Float, nullable=True)
    final_cost = Column(Float, nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<ShowNote(id={self.id}, title='{self.title}', publish_date='{self.publish_date}')>"
