"""Test suite for swatchkit.

Test Structure:
- unit/: Unit tests for individual components
  - color/: Parsing, luminance and contrast
  - validation/: Rules, registry and the validation engine
  - search/: Combinatorics, swatch building and the search engine
  - executor/: Worker pool and task handlers
  - caching/: SQLite storage, eviction and the persistent cache
  - config/, utils/, cli/: Ambient layers
- conftest.py: Shared fixtures
"""
