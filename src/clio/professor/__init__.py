"""Explanation sources for stored commands.

Usage:
    from clio.professor import OpenAISource

    source = OpenAISource(api_key="sk-...", model="gpt-4o")
    markdown = source.prompt("tar -czf {{.archive}} {{.dir}}")
"""

from clio.professor.base import ExplanationSource
from clio.professor.mock import MockSource
from clio.professor.openai import OpenAISource

__all__ = [
    "ExplanationSource",
    "MockSource",
    "OpenAISource",
]
