from sqlalchemy import Column, Integer, String, Text

from ..database import Base


class Command(Base):
    __tablename__ = "commands"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    how_to = Column(Text, nullable=False)
    platform = Column(String(255), nullable=False)  # e.g. "Ubuntu", ".NET Core 3.1"
    command_line = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Command id={self.id} platform={self.platform!r}>"
