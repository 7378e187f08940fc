"""A fixed, in-memory catalog of record albums."""

from __future__ import annotations

from pydantic import BaseModel


class Album(BaseModel):
    id: str
    title: str
    artist: str
    price: float


SEED_ALBUMS: tuple[Album, ...] = (
    Album(id="1", title="Blue Train", artist="John Coltrane", price=56.99),
    Album(id="2", title="Jeru", artist="Gerry Mulligan", price=17.99),
    Album(id="3", title="Sarah Vaughan and Clifford Brown", artist="Sarah Vaughan", price=39.99),
)


class AlbumCatalog:
    """Read-only album store owned by the application instance."""

    def __init__(self, albums: tuple[Album, ...] | list[Album] = SEED_ALBUMS) -> None:
        self._albums = list(albums)

    def all(self) -> list[Album]:
        return list(self._albums)

    def __len__(self) -> int:
        return len(self._albums)
