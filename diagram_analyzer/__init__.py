"""
Azure Diagram Analyzer

Detects Azure services in extracted architecture-diagram content, scores the
detections and checks the resulting resources against manual policies.
"""

__version__ = "0.1.0"
