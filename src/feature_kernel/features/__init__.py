from .loader import feature_source, load_features, parse_features

__all__ = ["load_features", "parse_features", "feature_source"]
