"""Dashboard widget modules, one per aggregate."""
