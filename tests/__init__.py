"""
Test Suite
==========

Test suite matching the dmg_background/ package structure.

Test Categories:
- unit: Unit tests for individual components, external tools faked
- integration: Runs against rasterization tools installed on this machine
"""
