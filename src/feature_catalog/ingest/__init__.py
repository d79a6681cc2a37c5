"""Feature inventory loading and validation."""

from .contracts import assert_feature_contract, features_to_frame, records_to_features
from .store import FeatureLoadError, FeatureStore, LoadedFeatures, load_features

__all__ = [
    "FeatureLoadError",
    "FeatureStore",
    "LoadedFeatures",
    "assert_feature_contract",
    "features_to_frame",
    "load_features",
    "records_to_features",
]
