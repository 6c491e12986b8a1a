"""Building blocks for multi-tenant services: identifiers, auth context, pagination, optional-value helpers, logging and tenant/user domain models."""

__version__ = "0.1.0"