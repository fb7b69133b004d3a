"""Map model types"""

from .model import MapBuilder, MapObject, TiledMap, TileLayer, Tileset

__all__ = ["MapBuilder", "MapObject", "TiledMap", "TileLayer", "Tileset"]
