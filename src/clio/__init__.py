"""clio: a personal library of parameterized shell commands.

Commands are stored with ``{{ .name }}`` placeholders, searched, filled in
and typed into the terminal, ready to run.
"""

__version__ = "0.1.0"
