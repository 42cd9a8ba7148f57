"""
BlacklistedToken model: the revocation denylist.

Fields:
- token (primary key): the raw bearer token, or "sha256:<hex>" of it when
  the service runs with REVOCATION_KEY_MODE=digest
- revoked_at (int): seconds since epoch

Rows are never updated. Once a token's natural expiry has passed its row
may be pruned by an external job.
"""
from sqlalchemy import Column, String, Integer, Text

from models.base_model import Base


class BlacklistedToken(Base):
    __tablename__ = "blacklisted_tokens"

    token = Column(Text().with_variant(String(1024), "mysql"), primary_key=True)
    revoked_at = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<BlacklistedToken revoked_at={self.revoked_at}>"
