"""SQLAlchemy ORM models for the URL shortener application.

Data Model Layout
=================
::
    short_url table
    ├─ id (SERIAL PRIMARY KEY)
    ├─ token (VARCHAR(255) UNIQUE, INDEXED)
    └─ original_url (TEXT UNIQUE NOT NULL)

How to Use
===========
**Step 1 — Import**::
    from urlshortener.models import ShortUrl

**Step 2 — Create a record**::
    record = ShortUrl(token="aZ3k9QpL0x", original_url="https://example.com")
    db.add(record)
    await db.commit()

**Step 3 — Query records**::
    result = await db.execute(select(ShortUrl).where(ShortUrl.token == "aZ3k9QpL0x"))
    record = result.scalar_one_or_none()

Key Behaviours
===============
- token and original_url are both unique; the database is the final arbiter
  when two requests race for the same value.
- Records are written once and never updated or deleted.

Classes:
    ShortUrl:  Association between a short url token and its original url.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from urlshortener.database import Base

__all__ = ["ShortUrl"]


class ShortUrl(Base):
    __tablename__ = "short_url"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    token: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    original_url: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<ShortUrl(id={self.id}, token='{self.token}', original_url='{self.original_url}')>"
