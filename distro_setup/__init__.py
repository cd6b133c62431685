"""Post-install setup for a fresh Linux machine.

Stages, in order, each confirmed before it runs:
- System detection (always runs; required by everything else)
- Git and SSH credentials
- Backup repository clone/update
- GRUB configuration from the repository
- Application install through the native package manager
"""

__all__ = []
