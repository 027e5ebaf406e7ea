"""Parameter files, halo-padded fields, variable registries, time settings and binary field output."""

__version__ = "0.1.0"