from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RequestMetadata:
    """Root value handed to resolvers; carries transport level credentials."""

    authorization: str = ""

    @classmethod
    def from_headers(cls, headers) -> "RequestMetadata":
        return cls(authorization=headers.get("Authorization", "") or "")
