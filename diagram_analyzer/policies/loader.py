"""
Manual policy loader.

Reads policy definitions from ``<policies_dir>/<category>/*.json|*.yaml``,
validates them and keeps the valid set in a time-based cache. A policy that
cannot be read or fails validation is logged and left out; it never stops
the rest of the set from loading.
"""

import asyncio
import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import structlog
import yaml
from pydantic import ValidationError

from ..exceptions import PolicyLoadError, PolicyValidationError, wrap_exception
from .models import ManualPolicy, PolicyCategory, PolicySeverity

logger = structlog.get_logger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 300
POLICY_FILE_SUFFIXES = (".json", ".yaml", ".yml")

Clock = Callable[[], float]


class PolicyCache:
    """Snapshot of the loaded policy set and when it was loaded."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Clock = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.snapshot: Optional[List[ManualPolicy]] = None
        self.loaded_at: float = 0.0

    def get(self) -> Optional[List[ManualPolicy]]:
        """The cached snapshot, or None when empty or expired."""
        if self.snapshot is None:
            return None
        if self.clock() - self.loaded_at >= self.ttl_seconds:
            return None
        return self.snapshot

    def store(self, policies: List[ManualPolicy]) -> None:
        self.snapshot = list(policies)
        self.loaded_at = self.clock()

    def clear(self) -> None:
        self.snapshot = None
        self.loaded_at = 0.0

    def stats(self) -> Dict[str, Any]:
        return {
            "cached": self.snapshot is not None,
            "age": self.clock() - self.loaded_at if self.snapshot is not None else 0.0,
            "policies": len(self.snapshot) if self.snapshot is not None else 0,
        }


def parse_policy_file(path: Path) -> Any:
    """Parse one JSON or YAML policy file."""
    try:
        content = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            return json.loads(content)
        return yaml.safe_load(content)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise wrap_exception(
            e,
            PolicyLoadError,
            f"Failed to load policy file {path.name}",
            file_path=str(path),
            category=path.parent.name,
        ) from e


def check_policy(raw: Any) -> ManualPolicy:
    """
    Validate a raw policy mapping.

    Raises:
        PolicyValidationError: If required fields are missing or invalid
    """
    policy_id = raw.get("id") if isinstance(raw, dict) else None
    if not isinstance(raw, dict):
        raise PolicyValidationError(
            "Policy definition must be a mapping",
            validation_errors=[f"got {type(raw).__name__}"],
        )
    try:
        return ManualPolicy.model_validate(raw)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(loc) for loc in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        ]
        raise PolicyValidationError(
            f"Policy '{policy_id or 'unknown'}' failed validation",
            policy_id=policy_id,
            validation_errors=errors,
            cause=e,
        ) from e


class ManualPolicyLoader:
    """Loads manual policies from a directory tree, one directory per category."""

    def __init__(
        self,
        policies_dir: Union[str, Path] = "policies",
        cache: Optional[PolicyCache] = None,
        categories: Sequence[PolicyCategory] = tuple(PolicyCategory),
    ):
        self.policies_dir = Path(policies_dir).resolve()
        self.cache = cache if cache is not None else PolicyCache()
        self.categories = tuple(categories)

    async def load_policies(self) -> List[ManualPolicy]:
        """Load and validate every category, serving from cache within the TTL."""
        cached = self.cache.get()
        if cached is not None:
            logger.debug("Serving manual policies from cache", policies=len(cached))
            return list(cached)

        raw_policies: List[Dict[str, Any]] = []
        for category in self.categories:
            raw_policies.extend(await self.load_raw_policies(category))

        valid = [
            policy
            for policy in (self.validate_policy(raw) for raw in raw_policies)
            if policy is not None
        ]
        logger.info(
            "Manual policies loaded successfully",
            total_policies=len(valid),
            invalid_policies=len(raw_policies) - len(valid),
            categories=len(self.categories),
        )
        self.cache.store(valid)
        return list(valid)

    async def load_raw_policies(
        self, category: Union[str, PolicyCategory]
    ) -> List[Dict[str, Any]]:
        """
        Read the policy files of one category without validating them.

        The category of each definition is forced to its directory name.
        """
        category_name = PolicyCategory(category).value
        category_dir = self.policies_dir / category_name
        if not category_dir.is_dir():
            logger.warning(
                "Policy category directory not found",
                category=category_name,
                category_dir=str(category_dir),
            )
            return []

        files = sorted(
            p for p in category_dir.iterdir() if p.suffix in POLICY_FILE_SUFFIXES
        )
        policies: List[Dict[str, Any]] = []
        for path in files:
            try:
                raw = await asyncio.to_thread(parse_policy_file, path)
            except PolicyLoadError as e:
                logger.error("Failed to load policy file", **e.context, error=e.message)
                continue
            if isinstance(raw, dict):
                raw["category"] = category_name
            policies.append(raw)

        logger.debug(
            "Loaded policies for category",
            category=category_name,
            count=len(policies),
            files=len(files),
        )
        return policies

    async def load_policies_by_category(
        self, category: Union[str, PolicyCategory]
    ) -> List[ManualPolicy]:
        raw_policies = await self.load_raw_policies(category)
        return [
            policy
            for policy in (self.validate_policy(raw) for raw in raw_policies)
            if policy is not None
        ]

    def validate_policy(self, raw: Any) -> Optional[ManualPolicy]:
        """Validated policy, or None after logging why it was rejected."""
        try:
            return check_policy(raw)
        except PolicyValidationError as e:
            logger.error("Policy validation failed", **e.context, error=e.message)
            return None

    async def get_policies_by_severity(
        self, severity: Union[str, PolicySeverity]
    ) -> List[ManualPolicy]:
        wanted = PolicySeverity(severity)
        return [p for p in await self.load_policies() if p.severity == wanted]

    async def get_policies_for_resource_type(
        self, resource_type: str
    ) -> List[ManualPolicy]:
        return [p for p in await self.load_policies() if p.applies_to(resource_type)]

    def clear_cache(self) -> None:
        """Drop the cached snapshot so the next load rereads the directory."""
        self.cache.clear()
        logger.debug("Manual policy cache cleared")

    def get_cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats()
