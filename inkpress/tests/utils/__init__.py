"""Shared fakes and synthetic rasters for inkpress tests."""
