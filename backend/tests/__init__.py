"""
Docket Backend Test Suite

Test structure:
- unit/: Test components in isolation (models, engine, API)
- integration/: Play the shipped scenarios end to end
"""
