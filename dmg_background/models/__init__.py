"""
Data Models
===========

Pydantic models for template parameters, DMG window layout and generation results.
"""
