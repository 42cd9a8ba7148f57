from stores.credential_store import CredentialStore, SqlAlchemyCredentialStore
from stores.revocation_store import RevocationStore, SqlAlchemyRevocationStore, token_digest

__all__ = [
    "CredentialStore",
    "SqlAlchemyCredentialStore",
    "RevocationStore",
    "SqlAlchemyRevocationStore",
    "token_digest",
]
