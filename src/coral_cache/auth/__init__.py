from .resolver import CredentialResolver, ResolvedCredentials, StoredCredentialResolver

__all__ = ["CredentialResolver", "ResolvedCredentials", "StoredCredentialResolver"]
