"""
TSStructure API Package.

FastAPI REST API exposing structure extraction over HTTP.
Requires Python 3.11+.
"""

# Import app lazily to avoid circular imports
# Use: from api.main import app
