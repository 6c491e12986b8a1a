"""Shared identifiers, value types, auth context and pagination types."""