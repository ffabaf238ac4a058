"""
CIFlowBot: dispatches ciflow labels on PyTorch pull requests.
"""

__version__ = "0.1.0"
