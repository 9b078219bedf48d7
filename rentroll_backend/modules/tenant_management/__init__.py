"""Tenant management module: tenant profiles and property assignment."""
