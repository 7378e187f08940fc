from .albums import Album, AlbumCatalog, SEED_ALBUMS
