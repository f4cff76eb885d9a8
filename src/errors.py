from __future__ import annotations


class SegmentationError(Exception):
    """Base class for everything the segmentation pipeline raises on purpose."""


class InvalidInputError(SegmentationError, ValueError):
    pass


class InvalidParameterError(SegmentationError, ValueError):
    pass


class InvalidClusterCountError(InvalidParameterError):
    def __init__(self, n_clusters, n_samples):
        self.n_clusters = n_clusters
        self.n_samples = n_samples
        super().__init__(
            f"n_clusters={n_clusters} must be in [1, {n_samples}] for {n_samples} rows"
        )


class EmptyGroupMeanError(SegmentationError):
    """Raised when a group has no observed values to average over."""

    def __init__(self, groups):
        self.groups = list(groups)
        super().__init__(f"no observed values to average in groups: {self.groups}")


class EmptyGroupMeanWarning(UserWarning):
    pass


class DegenerateVarianceWarning(UserWarning):
    pass
