from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

import yaml

from slugswap.errors import ArgumentError, PolicyError
from slugswap.models import ScanRequest

logger = logging.getLogger(__name__)

REQUIRED_POLICY_FIELDS = {"ignored_directories", "profiles"}

DEFAULT_POLICY_PATH = Path(__file__).resolve().parent.parent / "data" / "policy.yaml"


@dataclass(frozen=True)
class ScanPolicy:
    profile: str
    ignored_dirs: FrozenSet[str]
    allowed_extensions: FrozenSet[str]

    @classmethod
    def load_default(cls, profile: Optional[str] = None) -> "ScanPolicy":
        return cls.load_from_path(DEFAULT_POLICY_PATH, profile)

    @classmethod
    def load_from_path(cls, path: Path, profile: Optional[str] = None) -> "ScanPolicy":
        raw = _read_policy(path)
        ignored = raw["ignored_directories"]
        profiles = raw["profiles"]

        name = profile or raw.get("default_profile") or next(iter(profiles))
        if name not in profiles:
            raise ArgumentError(
                f"Unknown profile '{name}'. Available: {', '.join(sorted(profiles))}"
            )

        extensions = _resolve_extensions(profiles, name, path)
        logger.debug(
            "Policy loaded: profile=%s, %d ignored directories, %d extensions (%s)",
            name,
            len(ignored),
            len(extensions),
            path.name,
        )
        return cls(
            profile=name,
            ignored_dirs=frozenset(ignored),
            allowed_extensions=frozenset(extensions),
        )

    def request_for(self, root: Path) -> ScanRequest:
        return ScanRequest(
            root=root,
            ignored_dirs=self.ignored_dirs,
            allowed_extensions=self.allowed_extensions,
        )


def available_profiles(path: Path = DEFAULT_POLICY_PATH) -> List[str]:
    return sorted(_read_policy(path)["profiles"])


def _read_policy(path: Path) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise PolicyError(f"Could not parse policy file '{path}': {e}") from e
    except OSError as e:
        raise PolicyError(f"Policy file not found: {path}") from e

    if not isinstance(raw, dict):
        raise PolicyError(f"Invalid policy file '{path}': expected a mapping.")
    missing = REQUIRED_POLICY_FIELDS - raw.keys()
    if missing:
        raise PolicyError(
            f"Invalid policy file '{path}': "
            f"missing keys: {', '.join(sorted(missing))}"
        )

    ignored = raw["ignored_directories"]
    if not isinstance(ignored, list) or not all(isinstance(d, str) for d in ignored):
        raise PolicyError(
            f"Invalid policy file '{path}': "
            "'ignored_directories' must be a list of names."
        )

    profiles = raw["profiles"]
    if not isinstance(profiles, dict) or not profiles:
        raise PolicyError(
            f"Invalid policy file '{path}': 'profiles' must be a non-empty mapping."
        )
    return raw


def _resolve_extensions(profiles: Dict[str, dict], name: str, path: Path) -> List[str]:
    """Follow the ``extends`` chain of a profile and merge its extensions."""
    extensions: List[str] = []
    seen: List[str] = []
    current: Optional[str] = name
    while current is not None:
        if current in seen:
            raise PolicyError(
                f"Invalid policy file '{path}': "
                f"profile inheritance loop ({' -> '.join(seen + [current])})"
            )
        seen.append(current)
        entry = profiles.get(current)
        if not isinstance(entry, dict):
            raise PolicyError(f"Invalid policy file '{path}': unknown profile '{current}'.")
        exts = entry.get("extensions") or []
        if not isinstance(exts, list):
            raise PolicyError(
                f"Invalid policy file '{path}': "
                f"profile '{current}' extensions must be a list."
            )
        for ext in exts:
            ext = str(ext)
            if ext.startswith("."):
                raise PolicyError(
                    f"Invalid policy file '{path}': "
                    f"extension '{ext}' must not start with a dot."
                )
            if ext not in extensions:
                extensions.append(ext)
        current = entry.get("extends")
    return extensions
