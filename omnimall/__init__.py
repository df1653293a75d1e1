"""Omnimall: campus peer-to-peer marketplace API."""
