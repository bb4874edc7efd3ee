"""Cross-cutting helpers: logging, settings and time sources."""
