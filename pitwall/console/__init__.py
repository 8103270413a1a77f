"""Headless replay console."""
