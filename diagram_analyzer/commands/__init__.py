"""CLI command modules for the diagram analyzer."""

from diagram_analyzer.commands.detect import detect
from diagram_analyzer.commands.policies import check_policies

__all__ = ["check_policies", "detect"]
