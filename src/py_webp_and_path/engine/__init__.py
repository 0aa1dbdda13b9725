"""流水线引擎包"""

from .pipeline import WebpPathPipeline


__all__ = ["WebpPathPipeline"]
