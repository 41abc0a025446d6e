from sqlalchemy import Column, Integer, String

from app.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=False)
    username = Column(String(128), unique=True, index=True, nullable=False)
    # bcrypt hash, never the plain password
    password = Column(String(128), nullable=False)

    @classmethod
    def from_record(cls, record: dict) -> "User":
        return cls(
            id=int(record["id"]),
            username=record["username"],
            password=record["password"],
        )

    def to_record(self) -> dict:
        return {"id": self.id, "username": self.username, "password": self.password}

    def __repr__(self):
        return f"<User id={self.id} username={self.username}>"
