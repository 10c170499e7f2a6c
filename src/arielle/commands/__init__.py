"""CLI sub-commands. Each module exposes a plain function registered on the root app."""
