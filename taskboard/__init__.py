"""Taskboard API - multi-tenant task and project management with RBAC."""
