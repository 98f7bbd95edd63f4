"""
Classifier gateway between the orchestrator and the remote model.
"""

from transcript_labeler.classifier.gateway import ClassifierGateway

__all__ = ["ClassifierGateway"]
