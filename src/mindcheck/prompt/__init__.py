"""Prompt rendering for the remote classifier.

Provides ``PromptManager``, a Jinja2-based template engine that renders the
classifier's system directive and the per-assessment request prompt.
"""

from mindcheck.prompt.manager import PromptManager

__all__ = ["PromptManager"]
