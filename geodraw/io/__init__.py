"""Interchange formats."""

from geodraw.io.geojson import ImportSummary, export_geojson, import_geojson, read_geojson, write_geojson

__all__ = ["ImportSummary", "export_geojson", "import_geojson", "read_geojson", "write_geojson"]
