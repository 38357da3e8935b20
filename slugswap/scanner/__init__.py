from .policy import ScanPolicy, available_profiles
from .scan import DirectoryWalker

__all__ = [
    "DirectoryWalker",
    "ScanPolicy",
    "available_profiles",
]
