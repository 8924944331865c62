"""Shared cross-cutting helpers (logging, tracing). No cache logic."""
