from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CatalogSet:
    """A set as described by the card catalog."""

    external_id: str
    name: str
    series: str | None
    total: int
    release_date: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CatalogSet":
        """Build from a catalog `/sets` entry."""
        return cls(
            external_id=data["id"],
            name=data["name"],
            series=data.get("series"),
            total=int(data.get("total") or data.get("printedTotal") or 0),
            release_date=data.get("releaseDate"),
        )


@dataclass(frozen=True)
class CatalogCard:
    """A card as described by the card catalog."""

    external_id: str
    name: str
    number: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CatalogCard":
        """Build from a catalog `/cards` entry."""
        return cls(
            external_id=data["id"],
            name=data["name"],
            number=str(data.get("number", "")),
        )
