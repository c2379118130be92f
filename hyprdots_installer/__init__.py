"""Hyprland dotfiles installer (Python-first, state-driven).

Core design goals:
- Idempotent steps, safe to re-run
- Backup before overwrite
- Declarative manifests instead of hard-coded package lists
- Dry-run planning without touching the system
- Centralized logging
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
