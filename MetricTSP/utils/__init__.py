from MetricTSP.utils.taxonomy import AlgorithmFamily, Strategy

__all__ = ["AlgorithmFamily", "Strategy"]
