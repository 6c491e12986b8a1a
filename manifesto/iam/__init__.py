"""Tenant and user domain models, repository contracts, domain errors and the tenant service."""