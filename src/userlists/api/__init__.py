"""API module for userlists.

api layer:
- Validates inputs through the domain layer, reads/writes through repo
- Returns {success, data | error} envelopes
"""
