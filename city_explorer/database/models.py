"""
SQLAlchemy models for the city explorer cache tables.
"""
from sqlalchemy import Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class LocationRow(Base):
    """Geocoded location, one row per distinct search query."""

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    search_query: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    formatted_query: Mapped[str] = mapped_column(String(255))
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)

    def __repr__(self):
        return f"LocationRow(id={self.id}, search_query={self.search_query!r})"


class WeatherRow(Base):
    """Cached forecast day. Rows are only ever appended."""

    __tablename__ = "weathers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    forecast: Mapped[str] = mapped_column(Text)
    time: Mapped[str] = mapped_column(String(255))
    location_id: Mapped[int] = mapped_column(ForeignKey("locations.id"), index=True)

    def __repr__(self):
        return f"WeatherRow(location_id={self.location_id}, time={self.time!r})"


class MeetupRow(Base):
    """Cached meetup event. Rows are only ever appended."""

    __tablename__ = "meetups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    link: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(255))
    creation_date: Mapped[str] = mapped_column(String(255))
    host: Mapped[str] = mapped_column(String(255))
    location_id: Mapped[int] = mapped_column(ForeignKey("locations.id"), index=True)

    def __repr__(self):
        return f"MeetupRow(location_id={self.location_id}, name={self.name!r})"
