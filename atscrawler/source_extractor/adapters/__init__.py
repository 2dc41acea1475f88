"""ATS Adapters.

This package contains concrete implementations of the SourceAdapter interface
for different applicant tracking systems.

Available adapters (configuration name -> class):
- greenhouse: GreenhouseAdapter (structured JSON)
- lever: LeverAdapter (structured JSON)
- recruitee: RecruiteeAdapter (structured JSON)
- breezy: BreezyAdapter (unstructured HTML)
- ashby: AshbyAdapter (hybrid JSON/HTML)
"""

from .ashby import AshbyAdapter
from .breezy import BreezyAdapter
from .greenhouse import GreenhouseAdapter
from .lever import LeverAdapter
from .recruitee import RecruiteeAdapter

ADAPTER_REGISTRY = {
    "greenhouse": GreenhouseAdapter,
    "lever": LeverAdapter,
    "recruitee": RecruiteeAdapter,
    "breezy": BreezyAdapter,
    "ashby": AshbyAdapter,
}

__all__ = [
    "ADAPTER_REGISTRY",
    "AshbyAdapter",
    "BreezyAdapter",
    "GreenhouseAdapter",
    "LeverAdapter",
    "RecruiteeAdapter",
]
